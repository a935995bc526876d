"""
main.py — FastAPI application entry point.

  GET  /health   — liveness plus session store reachability
  GET  /usage    — today's quota for a session
  POST /chat     — one chat turn (quota, name memory, history, model)

Design decisions:
- Routes are thin — the turn pipeline lives in chat/relay.py
- The session store is opened in the lifespan and injected via Depends,
  so tests swap it without touching handler logic
- Every error body is {"error": "..."}
"""
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from pulse.chat.relay import relay_turn
from pulse.config import Settings, get_settings
from pulse.models import ChatRequest, ChatResponse, ErrorResponse, HealthResponse, UsageResponse
from pulse.observability.logger import Timer, get_logger
from pulse.store import build_backend
from pulse.store.session import SessionState, UsageSnapshot

logger = get_logger(__name__)

NO_TEXT_ERROR = "No text provided"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the session store on startup, close it on shutdown."""
    settings = get_settings()
    logger.info("app_startup", extra={"version": "1.0.0"})
    logger.info("config_loaded", extra={
        "model": settings.openai_model,
        "store_backend": settings.store_backend,
        "daily_free_limit": settings.daily_free_limit,
        "fact_lookup_enabled": settings.fact_lookup_enabled,
    })
    state = SessionState(build_backend(settings), settings)
    state.open()
    app.state.session_state = state
    yield
    state.close()
    logger.info("app_shutdown")


app = FastAPI(
    title="PULSE Relay",
    description="Short-answer chat relay with a daily free quota and session memory.",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_allow_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_session_state(request: Request) -> SessionState:
    return request.app.state.session_state


# ── Error rendering ───────────────────────────────────────────────────────────

# Starlette's base class also covers the 404/405 raised by routing
@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=str(exc.detail)).model_dump(),
        headers=exc.headers,
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    # Malformed bodies are treated like a missing message
    return JSONResponse(status_code=400, content=ErrorResponse(error=NO_TEXT_ERROR).model_dump())


def _usage_fields(usage: UsageSnapshot) -> dict:
    return {
        "used_today": usage.used,
        "remaining_today": usage.remaining,
        "limit": usage.limit,
        "day_key": usage.day,
    }


# ── Health ────────────────────────────────────────────────────────────────────

@app.get("/health", response_model=HealthResponse, tags=["system"])
def health_check(state: SessionState = Depends(get_session_state)):
    return HealthResponse(store=state.backend.name, store_connected=state.connected())


# ── Usage ─────────────────────────────────────────────────────────────────────

@app.get("/usage", response_model=UsageResponse, tags=["chat"])
def usage(
    session_id: str | None = Query(default=None, alias="sessionId"),
    state: SessionState = Depends(get_session_state),
    settings: Settings = Depends(get_settings),
):
    sid = (session_id or "").strip() or settings.default_session_id
    return UsageResponse(**_usage_fields(state.read_usage(sid)))


# ── Chat ──────────────────────────────────────────────────────────────────────

@app.post(
    "/chat",
    response_model=ChatResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    tags=["chat"],
)
def chat(
    request: ChatRequest | None = None,
    state: SessionState = Depends(get_session_state),
    settings: Settings = Depends(get_settings),
):
    """
    One chat turn.

    - 400 if text is missing or blank
    - 200 with paywall=true once today's free quota is used up
    - 200 with the shaped reply otherwise
    - 500 if the model call fails
    """
    text = (request.text if request else None) or ""
    if not text.strip():
        raise HTTPException(status_code=400, detail=NO_TEXT_ERROR)

    session_id = (request.session_id or "").strip() or settings.default_session_id

    with Timer() as t:
        try:
            result = relay_turn(text, session_id, state, settings)
        except Exception as e:
            logger.exception("chat_failed", extra={"session_id": session_id})
            raise HTTPException(status_code=500, detail=str(e))

    logger.info(
        "chat_complete",
        extra={
            "session_id": session_id,
            "source": result.source,
            "paywall": result.paywall,
            "text_len": len(text),
            "latency_ms": t.elapsed_ms,
        },
    )

    return ChatResponse(reply=result.reply, paywall=result.paywall, **_usage_fields(result.usage))
