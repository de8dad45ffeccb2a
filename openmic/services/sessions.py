"""Session store (active access tokens and password-reset tokens).

Handlers receive a store through dependency injection; nothing here is
process-global.
"""
import logging
from abc import ABC, abstractmethod

import redis

logger = logging.getLogger(__name__)


class SessionStore(ABC):
    """Keyed string store with per-key expiry."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the value for ``key``, or None if absent or expired."""
        ...

    @abstractmethod
    def put(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store ``value`` under ``key`` for ``ttl_seconds``."""
        ...

    @abstractmethod
    def pop(self, key: str) -> str | None:
        """Atomically read and remove ``key``. Returns None if it was absent."""
        ...

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove ``key``. Returns True if something was removed."""
        ...

    @abstractmethod
    def expire(self, key: str, ttl_seconds: int) -> bool:
        """Reset the time-to-live of ``key``. Returns False if it does not exist."""
        ...

    @abstractmethod
    def delete_by_value(self, value: str) -> int:
        """Remove every key holding ``value``. Returns the number removed."""
        ...


class RedisSessionStore(SessionStore):
    """SessionStore over Redis, one key per entry under ``{namespace}:``."""

    def __init__(self, client: redis.Redis, namespace: str = "session") -> None:
        self._redis = client
        self._namespace = namespace

    def _key(self, key: str) -> str:
        return f"{self._namespace}:{key}"

    def get(self, key: str) -> str | None:
        return self._redis.get(self._key(key))

    def put(self, key: str, value: str, ttl_seconds: int) -> None:
        self._redis.set(self._key(key), value, ex=ttl_seconds)

    def pop(self, key: str) -> str | None:
        return self._redis.getdel(self._key(key))

    def delete(self, key: str) -> bool:
        return bool(self._redis.delete(self._key(key)))

    def expire(self, key: str, ttl_seconds: int) -> bool:
        return bool(self._redis.expire(self._key(key), ttl_seconds))

    def delete_by_value(self, value: str) -> int:
        removed = 0
        for full_key in self._redis.scan_iter(match=f"{self._namespace}:*"):
            if self._redis.get(full_key) == value:
                removed += self._redis.delete(full_key)
        if removed:
            logger.info(f"Revoked {removed} '{self._namespace}' entries")
        return removed
