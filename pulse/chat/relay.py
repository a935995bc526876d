"""
chat/relay.py — One chat turn from validated text to shaped reply.

Pipeline:
1. Quota check (paywall short-circuit, no model call)
2. Count the request
3. Name detection
4. Optional fact lookup shortcut (bypasses the model on success)
5. Record the user turn and build the model context
6. LLM completion
7. Shape the reply and record the assistant turn

Store problems never fail a turn (SessionState degrades to empty state).
Model failures propagate to the route, which answers 500.
"""
from dataclasses import dataclass
from typing import Literal

from pulse.chat.detection import NameDetector, detect_language
from pulse.config import Settings
from pulse.facts import lookup_head_of_state, match_head_of_state_question, render_head_of_state_answer
from pulse.llm.client import chat_completion
from pulse.llm.prompt_builder import build_messages
from pulse.llm.shaping import shape_reply
from pulse.models import ChatTurn
from pulse.observability.logger import get_logger
from pulse.store.session import SessionState, UsageSnapshot

logger = get_logger(__name__)

PAYWALL_MESSAGES = {
    "es": "Límite gratis alcanzado. Vuelve mañana para seguir hablando con PULSE.",
    "en": "Free limit reached. Come back tomorrow to keep talking with PULSE.",
}

name_detector = NameDetector()


@dataclass(frozen=True)
class RelayResult:
    reply: str
    paywall: bool
    usage: UsageSnapshot
    source: Literal["paywall", "fact", "model"]


def relay_turn(text: str, session_id: str, state: SessionState, settings: Settings) -> RelayResult:
    language = detect_language(text)

    # ── Quota ─────────────────────────────────────────────────────────────────
    usage = state.read_usage(session_id)
    if usage.used >= usage.limit:
        logger.info("paywall_hit", extra={"session_id": session_id, "used": usage.used, "day": usage.day})
        return RelayResult(
            reply=PAYWALL_MESSAGES[language],
            paywall=True,
            usage=usage,
            source="paywall",
        )

    usage = state.snapshot(state.increment_usage(session_id), usage.day)

    # ── Name ──────────────────────────────────────────────────────────────────
    detected = name_detector.detect(text)
    if detected:
        state.write_name(session_id, detected)
        logger.info("name_saved", extra={"session_id": session_id})

    # ── Fact lookup shortcut ──────────────────────────────────────────────────
    if settings.fact_lookup_enabled:
        question = match_head_of_state_question(text)
        if question is not None:
            found = lookup_head_of_state(question.country.entity_id, question.language, settings=settings)
            if found.succeeded:
                return RelayResult(
                    reply=render_head_of_state_answer(question, found.value),
                    paywall=False,
                    usage=usage,
                    source="fact",
                )
            logger.info(
                "fact_lookup_fallback",
                extra={"session_id": session_id, "status": found.status.value, "reason": found.reason},
            )

    # ── History + context ─────────────────────────────────────────────────────
    user_turn = ChatTurn(role="user", content=text)
    previous = state.read_recent_turns(session_id, limit=max(settings.context_turns - 1, 0))
    state.append_turn(session_id, user_turn)
    context = (previous + [user_turn])[-max(settings.context_turns, 1):]

    messages = build_messages(context, name=detected or state.read_name(session_id))

    # ── Model ─────────────────────────────────────────────────────────────────
    raw, _tokens = chat_completion(messages, settings=settings)
    reply = shape_reply(
        raw,
        max_lines=settings.reply_max_lines,
        max_chars=settings.reply_max_chars,
        language=language,
    )
    state.append_turn(session_id, ChatTurn(role="assistant", content=reply))

    return RelayResult(reply=reply, paywall=False, usage=usage, source="model")
