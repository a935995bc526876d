"""
store/base.py — Key-value backend contract used by the session store.

Every operation takes its TTL explicitly and returns an Outcome, so the
session layer decides what "backend down" means (it degrades to stateless).
"""
from abc import ABC, abstractmethod

from pulse.outcome import Outcome


class KeyValueBackend(ABC):
    name: str = "abstract"

    def open(self) -> None:
        """Acquire connections. Must not raise when the backend is unreachable."""

    def close(self) -> None:
        """Release connections."""

    @abstractmethod
    def ping(self) -> bool: ...

    @abstractmethod
    def get(self, key: str) -> Outcome[str | None]: ...

    @abstractmethod
    def set(self, key: str, value: str, ttl: int) -> Outcome[None]: ...

    @abstractmethod
    def incr(self, key: str, ttl: int) -> Outcome[int]:
        """Increment an integer counter and refresh its expiry. Returns the new value."""

    @abstractmethod
    def push(self, key: str, item: str, max_len: int, ttl: int) -> Outcome[None]:
        """Append to a list, keep only its last max_len items, refresh expiry."""

    @abstractmethod
    def tail(self, key: str, count: int) -> Outcome[list[str]]:
        """Last `count` list items, oldest first."""
