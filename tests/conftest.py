"""
tests/conftest.py — Shared fixtures.
"""
import pytest

from pulse.outcome import Outcome
from pulse.store.base import KeyValueBackend


class DownBackend(KeyValueBackend):
    """Every call reports `unavailable`, like RedisBackend with Redis down."""
    name = "down"

    def ping(self):
        return False

    def get(self, key):
        return Outcome.unavailable("connection refused")

    def set(self, key, value, ttl):
        return Outcome.unavailable("connection refused")

    def incr(self, key, ttl):
        return Outcome.unavailable("connection refused")

    def push(self, key, item, max_len, ttl):
        return Outcome.unavailable("connection refused")

    def tail(self, key, count):
        return Outcome.unavailable("connection refused")


@pytest.fixture
def down_backend():
    return DownBackend()
