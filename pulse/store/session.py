"""
store/session.py — Session State Store: daily quota, display name, history.

Three independent pieces of state per session, each with its own key and
expiry window:

  {prefix}:usage:{session}:{YYYY-MM-DD}   counter, refreshed on every increment
  {prefix}:name:{session}                 display name
  {prefix}:history:{session}              JSON turns, trimmed to the last K

The usage key embeds the UTC day, so the counter "resets" at midnight UTC
simply because a new key is used.

If the backend is unavailable every read returns its empty value and every
write is dropped: the request continues as if the session were new.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable

from pydantic import ValidationError

from pulse.config import Settings
from pulse.models import ChatTurn
from pulse.observability.logger import get_logger
from pulse.outcome import Outcome
from pulse.store.base import KeyValueBackend

logger = get_logger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class UsageSnapshot:
    used: int
    remaining: int
    limit: int
    day: str


class SessionState:
    def __init__(
        self,
        backend: KeyValueBackend,
        settings: Settings,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.backend = backend
        self._settings = settings
        self._clock = clock

    # ── Lifecycle ─────────────────────────────────────────────────────────────

    def open(self) -> None:
        self.backend.open()

    def close(self) -> None:
        self.backend.close()

    def connected(self) -> bool:
        return self.backend.ping()

    # ── Keys ──────────────────────────────────────────────────────────────────

    def day_key(self) -> str:
        return self._clock().astimezone(timezone.utc).strftime("%Y-%m-%d")

    def _key(self, kind: str, session_id: str, *suffix: str) -> str:
        return ":".join((self._settings.store_key_prefix, kind, session_id, *suffix))

    def _degraded(self, op: str, session_id: str, outcome: Outcome) -> None:
        logger.warning(
            "store_unavailable",
            extra={"op": op, "session_id": session_id, "reason": outcome.reason},
        )

    # ── Usage ─────────────────────────────────────────────────────────────────

    def snapshot(self, used: int, day: str | None = None) -> UsageSnapshot:
        limit = self._settings.daily_free_limit
        used = max(used, 0)
        return UsageSnapshot(
            used=used,
            remaining=max(limit - used, 0),
            limit=limit,
            day=day or self.day_key(),
        )

    def read_usage(self, session_id: str) -> UsageSnapshot:
        day = self.day_key()
        outcome = self.backend.get(self._key("usage", session_id, day))
        if not outcome.succeeded:
            self._degraded("read_usage", session_id, outcome)
        try:
            used = int(outcome.value_or("0"))
        except ValueError:
            used = 0
        return self.snapshot(used, day)

    def increment_usage(self, session_id: str) -> int:
        """Count one request for today. Returns the new count, 0 when degraded."""
        key = self._key("usage", session_id, self.day_key())
        outcome = self.backend.incr(key, self._settings.usage_ttl_seconds)
        if not outcome.succeeded:
            self._degraded("increment_usage", session_id, outcome)
        return outcome.value_or(0)

    # ── Name ──────────────────────────────────────────────────────────────────

    def read_name(self, session_id: str) -> str | None:
        outcome = self.backend.get(self._key("name", session_id))
        if not outcome.succeeded:
            self._degraded("read_name", session_id, outcome)
        return outcome.value_or(None) or None

    def write_name(self, session_id: str, name: str) -> None:
        outcome = self.backend.set(self._key("name", session_id), name, self._settings.name_ttl_seconds)
        if not outcome.succeeded:
            self._degraded("write_name", session_id, outcome)

    # ── History ───────────────────────────────────────────────────────────────

    def append_turn(self, session_id: str, turn: ChatTurn) -> None:
        outcome = self.backend.push(
            self._key("history", session_id),
            turn.model_dump_json(),
            max_len=self._settings.history_max_turns,
            ttl=self._settings.history_ttl_seconds,
        )
        if not outcome.succeeded:
            self._degraded("append_turn", session_id, outcome)

    def read_recent_turns(self, session_id: str, limit: int | None = None) -> list[ChatTurn]:
        """Most recent turns, oldest first, never more than history_max_turns."""
        cap = self._settings.history_max_turns
        count = cap if limit is None else min(limit, cap)
        outcome = self.backend.tail(self._key("history", session_id), count)
        if not outcome.succeeded:
            self._degraded("read_recent_turns", session_id, outcome)

        turns: list[ChatTurn] = []
        for raw in outcome.value_or([]):
            try:
                turns.append(ChatTurn.model_validate_json(raw))
            except ValidationError:
                logger.warning("history_entry_skipped", extra={"session_id": session_id})
        return turns
