"""
store/redis_backend.py — Redis-backed key-value store.

Counters use INCR + EXPIRE, history uses RPUSH + LTRIM + EXPIRE, each pair
sent in one pipeline. Any RedisError is reported as `unavailable` so the
session layer can fall back to stateless mode instead of failing the request.
"""
import redis

from pulse.observability.logger import get_logger
from pulse.outcome import Outcome
from pulse.store.base import KeyValueBackend

logger = get_logger(__name__)


class RedisBackend(KeyValueBackend):
    name = "redis"

    def __init__(self, url: str, socket_timeout: float = 2.0, client: redis.Redis | None = None) -> None:
        self._url = url
        self._socket_timeout = socket_timeout
        self._client = client

    def open(self) -> None:
        if self._client is None:
            self._client = redis.Redis.from_url(
                self._url,
                decode_responses=True,
                socket_timeout=self._socket_timeout,
                socket_connect_timeout=self._socket_timeout,
            )
        if self.ping():
            logger.info("redis_connected")
        else:
            logger.warning("redis_unreachable_at_startup")

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def ping(self) -> bool:
        if self._client is None:
            return False
        try:
            return bool(self._client.ping())
        except redis.RedisError:
            return False

    def get(self, key: str) -> Outcome[str | None]:
        if self._client is None:
            return Outcome.unavailable("redis client not open")
        try:
            return Outcome.ok(self._client.get(key))
        except redis.RedisError as e:
            return Outcome.unavailable(str(e))

    def set(self, key: str, value: str, ttl: int) -> Outcome[None]:
        if self._client is None:
            return Outcome.unavailable("redis client not open")
        try:
            self._client.set(key, value, ex=ttl)
            return Outcome.ok(None)
        except redis.RedisError as e:
            return Outcome.unavailable(str(e))

    def incr(self, key: str, ttl: int) -> Outcome[int]:
        if self._client is None:
            return Outcome.unavailable("redis client not open")
        try:
            pipe = self._client.pipeline()
            pipe.incr(key)
            pipe.expire(key, ttl)
            count, _ = pipe.execute()
            return Outcome.ok(int(count))
        except redis.RedisError as e:
            return Outcome.unavailable(str(e))

    def push(self, key: str, item: str, max_len: int, ttl: int) -> Outcome[None]:
        if self._client is None:
            return Outcome.unavailable("redis client not open")
        try:
            pipe = self._client.pipeline()
            pipe.rpush(key, item)
            pipe.ltrim(key, -max_len, -1)
            pipe.expire(key, ttl)
            pipe.execute()
            return Outcome.ok(None)
        except redis.RedisError as e:
            return Outcome.unavailable(str(e))

    def tail(self, key: str, count: int) -> Outcome[list[str]]:
        if self._client is None:
            return Outcome.unavailable("redis client not open")
        if count <= 0:
            return Outcome.ok([])
        try:
            return Outcome.ok(list(self._client.lrange(key, -count, -1)))
        except redis.RedisError as e:
            return Outcome.unavailable(str(e))
