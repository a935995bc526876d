"""
llm/client.py — OpenAI chat completions client over httpx.

  POST {base_url}/chat/completions
  {"model": "gpt-4.1-mini", "messages": [...], "temperature": 0.3, "max_tokens": 150}
  -> {"choices": [{"message": {"role": "assistant", "content": "..."}}], "usage": {...}}

Any OpenAI-compatible server works by changing OPENAI_BASE_URL.
Failures raise: the chat route turns them into a 500.
"""
import httpx

from pulse.config import Settings, get_settings
from pulse.observability.logger import get_logger, Timer

logger = get_logger(__name__)


class LLMConfigError(RuntimeError):
    """Raised when the model cannot be called because of missing configuration."""


def chat_completion(
    messages: list[dict],
    temperature: float | None = None,
    max_tokens: int | None = None,
    client: httpx.Client | None = None,
    settings: Settings | None = None,
) -> tuple[str, int]:
    """
    Call the chat completions endpoint and return (response_text, total_tokens).

    Args:
        messages: List of {"role": "system"|"user"|"assistant", "content": str}
        temperature: Override the default from settings if provided
        max_tokens: Override the default from settings if provided
        client: Optional pre-built httpx client (tests pass one with a MockTransport)
        settings: Request-scoped settings; the cached process settings when omitted

    Raises:
        LLMConfigError: if no API key is configured
        httpx.HTTPError: on transport failure or a non-2xx response
    """
    settings = settings or get_settings()
    if not settings.openai_api_key:
        raise LLMConfigError("Missing OPENAI_API_KEY in environment or .env")

    payload = {
        "model": settings.openai_model,
        "messages": messages,
        "temperature": temperature if temperature is not None else settings.llm_temperature,
        "max_tokens": max_tokens if max_tokens is not None else settings.llm_max_tokens,
    }
    url = f"{settings.openai_base_url.rstrip('/')}/chat/completions"
    headers = {"Authorization": f"Bearer {settings.openai_api_key}"}

    with Timer() as t:
        if client is None:
            with httpx.Client(timeout=settings.llm_timeout_seconds) as owned:
                data = _post(owned, url, payload, headers)
        else:
            data = _post(client, url, payload, headers)

    choices = data.get("choices") or [{}]
    answer = (choices[0].get("message") or {}).get("content") or ""
    token_count = (data.get("usage") or {}).get("total_tokens", 0)

    logger.info(
        "llm_completion",
        extra={
            "model": settings.openai_model,
            "tokens": token_count,
            "latency_ms": t.elapsed_ms,
        },
    )
    return answer, token_count


def _post(client: httpx.Client, url: str, payload: dict, headers: dict) -> dict:
    response = client.post(url, json=payload, headers=headers)
    response.raise_for_status()
    return response.json()
