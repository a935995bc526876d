"""
llm/shaping.py — Force model output into the short-form reply format.

The prompt asks for brevity but the model does not always comply, so the
reply is cut to at most `max_lines` non-empty lines and `max_chars`
characters before it reaches the client or the history.
"""

ELLIPSIS = "…"

FALLBACK_REPLIES = {
    "es": "No tengo respuesta.",
    "en": "I don't have an answer.",
}


def shape_reply(text: str, max_lines: int = 2, max_chars: int = 500, language: str = "es") -> str:
    lines = [line.strip() for line in (text or "").splitlines()]
    kept = [line for line in lines if line][:max_lines]
    reply = "\n".join(kept)

    if not reply:
        return FALLBACK_REPLIES.get(language, FALLBACK_REPLIES["es"])[:max_chars]

    if len(reply) > max_chars:
        reply = reply[: max(max_chars - len(ELLIPSIS), 0)].rstrip() + ELLIPSIS
    return reply
