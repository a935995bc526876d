"""
tests/test_session_state.py — Session State Store over the in-memory backend.

Clocks are injected, so day rollover and TTL expiry are tested without
sleeping. The degraded-mode tests use the down_backend fixture.
"""
from datetime import datetime, timedelta, timezone

import pytest

from pulse.config import Settings
from pulse.models import ChatTurn
from pulse.store.memory import MemoryBackend
from pulse.store.session import SessionState


# ── Helpers ────────────────────────────────────────────────────────────────────

class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now


class FakeDay:
    def __init__(self, when: datetime) -> None:
        self.when = when

    def __call__(self) -> datetime:
        return self.when


@pytest.fixture
def settings():
    return Settings(daily_free_limit=3, history_max_turns=4)


@pytest.fixture
def day():
    return FakeDay(datetime(2026, 10, 18, 23, 30, tzinfo=timezone.utc))


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def state(settings, day, clock):
    return SessionState(MemoryBackend(clock=clock), settings, clock=day)


# ── Usage ──────────────────────────────────────────────────────────────────────

class TestUsage:

    def test_new_session_has_zero_usage(self, state):
        usage = state.read_usage("s1")
        assert usage.used == 0
        assert usage.remaining == 3
        assert usage.limit == 3
        assert usage.day == "2026-10-18"

    def test_count_equals_number_of_increments(self, state):
        for expected in range(1, 6):
            assert state.increment_usage("s1") == expected
        assert state.read_usage("s1").used == 5

    def test_remaining_never_negative(self, state):
        for _ in range(5):
            state.increment_usage("s1")
        assert state.read_usage("s1").remaining == 0

    def test_sessions_are_independent(self, state):
        state.increment_usage("s1")
        state.increment_usage("s1")
        state.increment_usage("s2")
        assert state.read_usage("s1").used == 2
        assert state.read_usage("s2").used == 1

    def test_resets_on_utc_day_rollover(self, state, day):
        state.increment_usage("s1")
        state.increment_usage("s1")
        day.when = day.when + timedelta(hours=1)   # 00:30 UTC next day
        usage = state.read_usage("s1")
        assert usage.day == "2026-10-19"
        assert usage.used == 0

    def test_day_key_uses_utc(self, settings, clock):
        local = datetime(2026, 10, 18, 22, 0, tzinfo=timezone(timedelta(hours=-5)))
        state = SessionState(MemoryBackend(clock=clock), settings, clock=FakeDay(local))
        assert state.day_key() == "2026-10-19"

    def test_counter_expires_after_ttl(self, state, clock, settings):
        state.increment_usage("s1")
        clock.now += settings.usage_ttl_seconds + 1
        assert state.read_usage("s1").used == 0


# ── Name ───────────────────────────────────────────────────────────────────────

class TestName:

    def test_unknown_name_is_none(self, state):
        assert state.read_name("s1") is None

    def test_write_then_read(self, state):
        state.write_name("s1", "Ana")
        assert state.read_name("s1") == "Ana"

    def test_overwrite(self, state):
        state.write_name("s1", "Ana")
        state.write_name("s1", "Marcos")
        assert state.read_name("s1") == "Marcos"

    def test_name_expires(self, state, clock, settings):
        state.write_name("s1", "Ana")
        clock.now += settings.name_ttl_seconds + 1
        assert state.read_name("s1") is None


# ── History ────────────────────────────────────────────────────────────────────

class TestHistory:

    def test_empty_history(self, state):
        assert state.read_recent_turns("s1") == []

    def test_append_order_preserved(self, state):
        state.append_turn("s1", ChatTurn(role="user", content="hola"))
        state.append_turn("s1", ChatTurn(role="assistant", content="Hola."))
        turns = state.read_recent_turns("s1")
        assert [t.role for t in turns] == ["user", "assistant"]
        assert [t.content for t in turns] == ["hola", "Hola."]

    def test_history_capped_oldest_dropped(self, state):
        for i in range(7):
            state.append_turn("s1", ChatTurn(role="user", content=f"m{i}"))
        turns = state.read_recent_turns("s1")
        assert [t.content for t in turns] == ["m3", "m4", "m5", "m6"]

    def test_limit_returns_most_recent(self, state):
        for i in range(4):
            state.append_turn("s1", ChatTurn(role="user", content=f"m{i}"))
        assert [t.content for t in state.read_recent_turns("s1", limit=2)] == ["m2", "m3"]

    def test_limit_cannot_exceed_cap(self, state):
        for i in range(6):
            state.append_turn("s1", ChatTurn(role="user", content=f"m{i}"))
        assert len(state.read_recent_turns("s1", limit=100)) == 4

    def test_zero_limit(self, state):
        state.append_turn("s1", ChatTurn(role="user", content="m"))
        assert state.read_recent_turns("s1", limit=0) == []

    def test_malformed_entries_skipped(self, state, settings):
        state.backend.push("pulse:history:s1", "not json", max_len=4, ttl=60)
        state.append_turn("s1", ChatTurn(role="user", content="ok"))
        assert [t.content for t in state.read_recent_turns("s1")] == ["ok"]

    def test_history_expires(self, state, clock, settings):
        state.append_turn("s1", ChatTurn(role="user", content="m"))
        clock.now += settings.history_ttl_seconds + 1
        assert state.read_recent_turns("s1") == []


# ── Degraded mode ──────────────────────────────────────────────────────────────

class TestDegradedBackend:

    @pytest.fixture
    def down(self, settings, day, down_backend):
        return SessionState(down_backend, settings, clock=day)

    def test_usage_reads_zero(self, down):
        usage = down.read_usage("s1")
        assert usage.used == 0
        assert usage.remaining == 3

    def test_increment_returns_zero(self, down):
        assert down.increment_usage("s1") == 0

    def test_writes_are_skipped(self, down):
        down.write_name("s1", "Ana")
        down.append_turn("s1", ChatTurn(role="user", content="hola"))
        assert down.read_name("s1") is None
        assert down.read_recent_turns("s1") == []

    def test_not_connected(self, down):
        assert down.connected() is False
