"""
models.py — Conversation types and API request/response shapes.

The HTTP contract uses camelCase keys (sessionId, usedToday, ...), so the API
models share a camelCase alias generator. Python code keeps snake_case.
"""
from __future__ import annotations
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# ── Conversation ──────────────────────────────────────────────────────────────

class ChatTurn(BaseModel):
    """One message in a conversation. Immutable once appended."""
    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"]
    content: str


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ── Chat ──────────────────────────────────────────────────────────────────────

class ChatRequest(_CamelModel):
    # Both optional: missing text is a 400 handled by the route, not a 422
    text: str | None = Field(
        default=None,
        description="The user's message",
        examples=["hola, me llamo Ana"],
    )
    session_id: str | None = Field(
        default=None,
        description="Opaque session identifier. Defaults to a shared session.",
        examples=["s1"],
    )


class UsageResponse(_CamelModel):
    used_today: int
    remaining_today: int
    limit: int
    day_key: str


class ChatResponse(UsageResponse):
    reply: str
    paywall: bool


# ── Health / errors ───────────────────────────────────────────────────────────

class HealthResponse(_CamelModel):
    ok: bool = True
    store: str
    store_connected: bool


class ErrorResponse(BaseModel):
    error: str
