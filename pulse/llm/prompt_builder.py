"""
llm/prompt_builder.py — System instruction + recent history.

The system prompt is two blocks:
  1. PERSONA / STYLE — static: who PULSE is and how short answers must be
  2. USER BLOCK      — dynamic: the stored display name, if any

The recent turns follow it unchanged; the current user message is already
the last of them.
"""
from pulse.models import ChatTurn

PERSONA_BLOCK = """You are PULSE.
Answer short, direct and useful.
Maximum 2 sentences.
No emojis.
No filler.
Language: always reply in the user's language."""

UNKNOWN_NAME = "unknown"


def build_system_prompt(name: str | None) -> str:
    return f"{PERSONA_BLOCK}\nUser's name: {name or UNKNOWN_NAME}"


def build_messages(history: list[ChatTurn], name: str | None = None) -> list[dict]:
    """
    Assemble the messages list for the model call.

    Returns:
        [{"role": "system", "content": "..."}, {"role": "user", ...}, ...]
    """
    messages: list[dict] = [{"role": "system", "content": build_system_prompt(name)}]
    messages.extend(turn.model_dump() for turn in history)
    return messages
