"""
Distributed lock manager.

Serializes work on a shared resource across threads, processes and service
instances. A lock is a key in the shared store holding a random token; it
expires after its TTL so a crashed holder cannot block others forever, and it
is only released by the holder of the matching token.
"""
import logging
import time
from contextlib import contextmanager
from typing import Callable, Iterator, Optional
from uuid import UUID, uuid4

from shared.domain.exceptions import LockTimeoutError
from .backend import LockBackend, LockBackendError

logger = logging.getLogger(__name__)

DEFAULT_RETRY_INTERVAL_SECONDS = 0.1


def cart_lock_key(user_id: UUID) -> str:
    """Standard lock key for cart operations of one user."""
    return f"cart:lock:user:{user_id}"


class DistributedLockManager:
    """Acquire/release per-key mutual exclusion tokens with TTL."""

    def __init__(
        self,
        backend: LockBackend,
        retry_interval: float = DEFAULT_RETRY_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.backend = backend
        self.retry_interval = retry_interval
        self._clock = clock
        self._sleep = sleep

    def try_acquire(self, key: str, ttl: float) -> Optional[str]:
        """
        Attempt to acquire the lock once.

        Args:
            key: Lock key (e.g. "cart:lock:user:<uuid>")
            ttl: Seconds before the lock expires on its own

        Returns:
            Lock token if acquired, None otherwise
        """
        token = uuid4().hex
        ttl_ms = max(1, int(ttl * 1000))
        try:
            acquired = self.backend.set_if_absent(key, token, ttl_ms)
        except LockBackendError as e:
            logger.error(f"Failed to acquire lock {key}: {e}", exc_info=True)
            return None

        if acquired:
            logger.debug(f"Lock acquired - key: {key}")
            return token

        logger.debug(f"Lock not acquired - key: {key}")
        return None

    def try_acquire_with_wait(self, key: str, ttl: float, max_wait: float) -> Optional[str]:
        """Poll for the lock at a fixed interval until max_wait seconds elapse."""
        deadline = self._clock() + max_wait
        while True:
            token = self.try_acquire(key, ttl)
            if token is not None:
                return token

            remaining = deadline - self._clock()
            if remaining <= 0:
                logger.warning(f"Failed to acquire lock after {max_wait}s - key: {key}")
                return None
            self._sleep(min(self.retry_interval, remaining))

    def release(self, key: str, token: Optional[str]) -> bool:
        """
        Release the lock if it is still held with this token.

        Returns False when the token is missing, the lock already expired, or
        someone else holds it now.
        """
        if token is None:
            return False

        try:
            released = self.backend.delete_if_equals(key, token)
        except LockBackendError as e:
            logger.error(f"Failed to release lock {key}: {e}", exc_info=True)
            return False

        if released:
            logger.debug(f"Lock released - key: {key}")
        else:
            logger.debug(f"Lock token mismatch or expired - key: {key}")
        return released

    @contextmanager
    def hold(self, key: str, ttl: float, max_wait: float) -> Iterator[str]:
        """Hold the lock for the duration of the block, or raise LockTimeoutError."""
        token = self.try_acquire_with_wait(key, ttl, max_wait)
        if token is None:
            raise LockTimeoutError(key, max_wait)
        try:
            yield token
        finally:
            self.release(key, token)
