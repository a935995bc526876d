"""
store/memory.py — Process-local backend.

State lives in a dict and is lost on restart. Expiry is checked on access
against a monotonic clock, which tests can replace, and writes sweep out
every expired key at most once per sweep interval, so keys nobody reads
again (yesterday's usage counters, abandoned sessions) are still dropped.
"""
import time
from dataclasses import dataclass
from typing import Any, Callable

from pulse.outcome import Outcome
from pulse.store.base import KeyValueBackend


@dataclass
class _Entry:
    value: Any
    expires_at: float


class MemoryBackend(KeyValueBackend):
    name = "memory"

    def __init__(self, clock: Callable[[], float] = time.monotonic, sweep_interval: float = 60.0) -> None:
        self._clock = clock
        self._sweep_interval = sweep_interval
        self._next_sweep = clock() + sweep_interval
        self._data: dict[str, _Entry] = {}

    def __len__(self) -> int:
        """Stored entries, expired ones included until the next sweep."""
        return len(self._data)

    def close(self) -> None:
        self._data.clear()

    def ping(self) -> bool:
        return True

    def _live(self, key: str) -> _Entry | None:
        entry = self._data.get(key)
        if entry is not None and entry.expires_at <= self._clock():
            self._data.pop(key, None)
            return None
        return entry

    def _sweep(self) -> None:
        now = self._clock()
        if now < self._next_sweep:
            return
        self._next_sweep = now + self._sweep_interval
        expired = [key for key, entry in list(self._data.items()) if entry.expires_at <= now]
        for key in expired:
            self._data.pop(key, None)

    def _write(self, key: str, value, ttl: int) -> None:
        self._sweep()
        self._data[key] = _Entry(value, self._clock() + ttl)

    def get(self, key: str) -> Outcome[str | None]:
        entry = self._live(key)
        return Outcome.ok(None if entry is None else entry.value)

    def set(self, key: str, value: str, ttl: int) -> Outcome[None]:
        self._write(key, value, ttl)
        return Outcome.ok(None)

    def incr(self, key: str, ttl: int) -> Outcome[int]:
        entry = self._live(key)
        count = (int(entry.value) if entry else 0) + 1
        self._write(key, str(count), ttl)
        return Outcome.ok(count)

    def push(self, key: str, item: str, max_len: int, ttl: int) -> Outcome[None]:
        entry = self._live(key)
        items = (entry.value if entry else []) + [item]
        self._write(key, items[-max_len:], ttl)
        return Outcome.ok(None)

    def tail(self, key: str, count: int) -> Outcome[list[str]]:
        entry = self._live(key)
        if entry is None or count <= 0:
            return Outcome.ok([])
        return Outcome.ok(list(entry.value[-count:]))
