from pulse.config import Settings
from pulse.store.base import KeyValueBackend
from pulse.store.memory import MemoryBackend
from pulse.store.redis_backend import RedisBackend


def build_backend(settings: Settings) -> KeyValueBackend:
    """Pick the backend named by STORE_BACKEND. The caller opens it."""
    kind = settings.store_backend.lower()
    if kind == "memory":
        return MemoryBackend()
    if kind == "redis":
        return RedisBackend(settings.redis_url, socket_timeout=settings.redis_socket_timeout)
    raise ValueError(f"Unknown store_backend '{settings.store_backend}'. Expected 'memory' or 'redis'.")


__all__ = ["KeyValueBackend", "MemoryBackend", "RedisBackend", "build_backend"]
