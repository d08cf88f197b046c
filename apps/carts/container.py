"""
Default wiring of the cart services.
"""
from typing import Optional

from django.conf import settings

from shared.infrastructure.locks import DistributedLockManager, LockBackend, RedisLockBackend
from .application.config import CartServiceConfig
from .application.services import CartService, CustomizationService
from .domain.ports.catalog import DesignLookup, ProductLookup
from .domain.ports.preview_image_store import PreviewImageStore
from .domain.ports.pricing_configuration import PricingConfiguration
from .domain.repositories import CartRepository, CustomizationRepository
from .infrastructure.pricing import SettingsPricingConfiguration
from .infrastructure.repositories import DjangoCartRepository, DjangoCustomizationRepository
from .infrastructure.storage import S3PreviewImageStore


def build_cart_service(
    product_lookup: ProductLookup,
    design_lookup: DesignLookup,
    cart_repository: Optional[CartRepository] = None,
    customization_repository: Optional[CustomizationRepository] = None,
    pricing_configuration: Optional[PricingConfiguration] = None,
    preview_store: Optional[PreviewImageStore] = None,
    lock_backend: Optional[LockBackend] = None,
    config: Optional[CartServiceConfig] = None,
) -> CartService:
    """
    Build a CartService with the Django, Redis and S3 adapters.

    The catalog lookups belong to the catalog context and must be supplied;
    every other collaborator defaults to its production adapter.
    """
    pricing_configuration = pricing_configuration or SettingsPricingConfiguration()
    customization_service = CustomizationService(
        customization_repository=customization_repository or DjangoCustomizationRepository(),
        design_lookup=design_lookup,
        pricing_configuration=pricing_configuration,
        preview_store=preview_store or S3PreviewImageStore(),
    )
    lock_manager = DistributedLockManager(
        backend=lock_backend or RedisLockBackend(),
        retry_interval=getattr(settings, 'CART_LOCK_RETRY_INTERVAL_SECONDS', 0.1),
    )
    return CartService(
        cart_repository=cart_repository or DjangoCartRepository(),
        product_lookup=product_lookup,
        pricing_configuration=pricing_configuration,
        customization_service=customization_service,
        lock_manager=lock_manager,
        config=config or CartServiceConfig.from_settings(),
    )
