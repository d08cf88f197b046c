"""
Lock backends for the distributed lock manager.
"""
from abc import ABC, abstractmethod
from typing import Optional

from django_redis import get_redis_connection
from redis.exceptions import RedisError, WatchError


class LockBackendError(Exception):
    """Raised when the shared lock store cannot be reached or misbehaves."""


class LockBackend(ABC):
    """Atomic primitives a shared key-value store must provide for locking."""

    @abstractmethod
    def set_if_absent(self, key: str, value: str, ttl_ms: int) -> bool:
        """Set key to value with a TTL only if the key does not exist."""
        pass

    @abstractmethod
    def delete_if_equals(self, key: str, value: str) -> bool:
        """Delete key only while it still holds value."""
        pass

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Get the current value of key."""
        pass


class RedisLockBackend(LockBackend):
    """Redis implementation using SET NX PX and a WATCH/MULTI compare-and-delete."""

    def __init__(self, client=None, alias: str = "default", prefix: str = ""):
        self.client = client if client is not None else get_redis_connection(alias)
        self.prefix = prefix

    def _make_key(self, key: str) -> str:
        """Create a lock key with prefix."""
        if self.prefix:
            return f"{self.prefix}:{key}"
        return key

    def set_if_absent(self, key: str, value: str, ttl_ms: int) -> bool:
        try:
            return bool(self.client.set(self._make_key(key), value, nx=True, px=ttl_ms))
        except RedisError as e:
            raise LockBackendError(f"SET NX failed for '{key}': {e}") from e

    def delete_if_equals(self, key: str, value: str) -> bool:
        redis_key = self._make_key(key)
        try:
            with self.client.pipeline() as pipe:
                pipe.watch(redis_key)
                current = self._decode(pipe.get(redis_key))
                if current != value:
                    pipe.unwatch()
                    return False
                pipe.multi()
                pipe.delete(redis_key)
                deleted, = pipe.execute()
                return bool(deleted)
        except WatchError:
            # Key changed between GET and DEL: it expired and was re-acquired.
            return False
        except RedisError as e:
            raise LockBackendError(f"Compare-and-delete failed for '{key}': {e}") from e

    def get(self, key: str) -> Optional[str]:
        try:
            return self._decode(self.client.get(self._make_key(key)))
        except RedisError as e:
            raise LockBackendError(f"GET failed for '{key}': {e}") from e

    @staticmethod
    def _decode(value) -> Optional[str]:
        if isinstance(value, bytes):
            return value.decode()
        return value
