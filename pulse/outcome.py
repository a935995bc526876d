"""
outcome.py — Explicit result type for calls to external dependencies.

The session store and the knowledge-graph lookup both have a fallback path
(run stateless, answer with the model instead). Returning an Outcome keeps
that branch in the caller's code instead of in an except block:

    names = backend.get(key)
    if not names.succeeded:
        ...fallback...
"""
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class OutcomeStatus(str, Enum):
    OK = "ok"
    UNAVAILABLE = "unavailable"   # dependency unreachable or had nothing to give
    ERROR = "error"               # dependency answered but the call failed


@dataclass(frozen=True)
class Outcome(Generic[T]):
    status: OutcomeStatus
    value: T | None = None
    reason: str = ""

    @classmethod
    def ok(cls, value: T) -> "Outcome[T]":
        return cls(OutcomeStatus.OK, value)

    @classmethod
    def unavailable(cls, reason: str) -> "Outcome[T]":
        return cls(OutcomeStatus.UNAVAILABLE, None, reason)

    @classmethod
    def error(cls, reason: str) -> "Outcome[T]":
        return cls(OutcomeStatus.ERROR, None, reason)

    @property
    def succeeded(self) -> bool:
        return self.status is OutcomeStatus.OK

    def value_or(self, default: T) -> T:
        """The value on success, else the default. A successful None also yields the default."""
        if self.succeeded and self.value is not None:
            return self.value
        return default
