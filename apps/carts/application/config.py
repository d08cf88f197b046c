"""
Cart service configuration.
"""
from dataclasses import dataclass

from django.conf import settings


@dataclass(frozen=True)
class CartServiceConfig:
    """Tunables for the cart mutation protocol."""
    lock_timeout_seconds: float = 10
    lock_wait_seconds: float = 5
    expiry_days: int = 30
    max_quantity_per_request: int = 100

    @classmethod
    def from_settings(cls) -> 'CartServiceConfig':
        """Build the configuration from Django settings."""
        return cls(
            lock_timeout_seconds=getattr(settings, 'CART_LOCK_TIMEOUT_SECONDS', cls.lock_timeout_seconds),
            lock_wait_seconds=getattr(settings, 'CART_LOCK_WAIT_SECONDS', cls.lock_wait_seconds),
            expiry_days=getattr(settings, 'CART_EXPIRY_DAYS', cls.expiry_days),
            max_quantity_per_request=getattr(
                settings, 'CART_MAX_QUANTITY_PER_REQUEST', cls.max_quantity_per_request
            ),
        )
