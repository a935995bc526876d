"""
config.py — All service settings loaded from environment variables.

Using pydantic-settings means:
- Every setting is type-validated at startup
- Defaults live next to the setting they describe
- Switching from the in-memory store to Redis = set STORE_BACKEND=redis
"""
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # ── LLM (OpenAI-compatible chat completions) ──────────────────────────────
    openai_api_key: str = ""
    openai_base_url: str = "https://api.openai.com/v1"
    openai_model: str = "gpt-4.1-mini"
    llm_temperature: float = 0.3
    llm_max_tokens: int = 150
    llm_timeout_seconds: float = 30.0

    # ── Quota ─────────────────────────────────────────────────────────────────
    daily_free_limit: int = 3
    default_session_id: str = "default"

    # ── Conversation history ──────────────────────────────────────────────────
    history_max_turns: int = 20       # turns kept per session
    context_turns: int = 10           # turns sent to the model

    # ── Reply shaping ─────────────────────────────────────────────────────────
    reply_max_lines: int = 2
    reply_max_chars: int = 500

    # ── Session store ─────────────────────────────────────────────────────────
    store_backend: str = "memory"     # "memory" or "redis"
    redis_url: str = "redis://localhost:6379/0"
    redis_socket_timeout: float = 2.0
    store_key_prefix: str = "pulse"
    usage_ttl_seconds: int = 48 * 3600
    name_ttl_seconds: int = 30 * 24 * 3600
    history_ttl_seconds: int = 7 * 24 * 3600

    # ── Fact lookup ───────────────────────────────────────────────────────────
    fact_lookup_enabled: bool = False
    wikidata_sparql_url: str = "https://query.wikidata.org/sparql"
    wikidata_timeout_seconds: float = 8.0
    wikidata_user_agent: str = "pulse-relay/1.0 (https://github.com/pulse-relay)"

    # ── App ───────────────────────────────────────────────────────────────────
    api_host: str = "0.0.0.0"
    api_port: int = 8081
    log_level: str = "INFO"
    cors_allow_origins: list[str] = ["*"]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Cached settings instance — reads .env once at startup.
    Tests override this through FastAPI's dependency_overrides.
    """
    return Settings()
