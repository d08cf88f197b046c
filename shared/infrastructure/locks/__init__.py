# Distributed locking
from .backend import LockBackend, LockBackendError, RedisLockBackend
from .lock_manager import DistributedLockManager, cart_lock_key

__all__ = [
    'LockBackend',
    'LockBackendError',
    'RedisLockBackend',
    'DistributedLockManager',
    'cart_lock_key',
]
