"""
observability/logger.py — Structured JSON logging.

One JSON object per line, so log shippers and jq can filter on fields.

Example output:
{"ts": "2026-10-18T10:00:00+00:00", "level": "INFO", "logger": "pulse.main",
 "message": "chat_complete", "session_id": "s1", "paywall": false, "latency_ms": 812}
"""
import json
import logging
import time
from datetime import datetime, timezone

from pulse.config import get_settings

# Attributes every LogRecord carries; anything else came in through extra={...}
_RECORD_ATTRS = set(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """Renders a record and its extra fields as a single-line JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(
            (key, value) for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRS
        )
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str, ensure_ascii=False)


def get_logger(name: str) -> logging.Logger:
    """
    Get a structured logger at the configured level.
    Usage:
        logger = get_logger(__name__)
        logger.info("paywall_hit", extra={"session_id": sid, "used": 3})
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(JSONFormatter())
        logger.addHandler(handler)
        logger.setLevel(get_settings().log_level.upper())
        logger.propagate = False
    return logger


class Timer:
    """Context manager for measuring latency."""

    def __init__(self) -> None:
        self._start: float = 0.0
        self.elapsed_ms: int = 0

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, *_) -> None:
        self.elapsed_ms = int((time.perf_counter() - self._start) * 1000)
