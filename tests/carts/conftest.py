"""
In-memory collaborators for cart service tests.
"""
import copy
import threading
import time
from decimal import Decimal
from typing import Dict, List, Optional
from uuid import UUID, uuid4

import pytest

from apps.carts.application.config import CartServiceConfig
from apps.carts.application.services import CartService, CustomizationService
from apps.carts.domain.entities.cart import Cart
from apps.carts.domain.entities.customization import Customization
from apps.carts.domain.ports.catalog import DesignLookup, ProductLookup
from apps.carts.domain.ports.preview_image_store import PreviewImageStore
from apps.carts.domain.ports.pricing_configuration import PricingConfiguration
from apps.carts.domain.repositories import CartRepository, CustomizationRepository
from apps.carts.domain.value_objects import (
    DesignSnapshot,
    ProductSnapshot,
    ShippingRule,
    VariantSnapshot,
)
from shared.domain.exceptions import ConflictError


class InMemoryCartRepository(CartRepository):
    """Stores deep copies so callers never share state with the store."""

    def __init__(self, latency: float = 0.0):
        self._carts: Dict[UUID, Cart] = {}
        self._guard = threading.Lock()
        self.latency = latency
        self.save_calls = 0
        self.fail_on_save: Optional[Exception] = None

    def save(self, cart: Cart) -> Cart:
        if self.latency:
            time.sleep(self.latency)
        with self._guard:
            self.save_calls += 1
            if self.fail_on_save is not None:
                raise self.fail_on_save
            stored = self._carts.get(cart.user_id)
            stored_version = stored.version if stored else 0
            if cart.version != stored_version:
                raise ConflictError("Cart", str(cart.id), cart.version)
            saved = copy.deepcopy(cart)
            saved.version = stored_version + 1
            saved.clear_domain_events()
            self._carts[cart.user_id] = saved
            return copy.deepcopy(saved)

    def find_by_id(self, cart_id: UUID) -> Optional[Cart]:
        with self._guard:
            for cart in self._carts.values():
                if cart.id == cart_id:
                    return copy.deepcopy(cart)
        return None

    def find_by_user_id(self, user_id: UUID) -> Optional[Cart]:
        if self.latency:
            time.sleep(self.latency)
        with self._guard:
            cart = self._carts.get(user_id)
            return copy.deepcopy(cart) if cart else None


class InMemoryCustomizationRepository(CustomizationRepository):

    def __init__(self):
        self._items: Dict[UUID, Customization] = {}
        self.deleted: List[UUID] = []
        self.batch_lookups = 0

    def save(self, customization: Customization) -> Customization:
        self._items[customization.id] = copy.deepcopy(customization)
        return copy.deepcopy(customization)

    def find_by_id(self, customization_id: UUID) -> Optional[Customization]:
        found = self._items.get(customization_id)
        return copy.deepcopy(found) if found else None

    def find_by_ids(self, customization_ids):
        self.batch_lookups += 1
        return [copy.deepcopy(self._items[i]) for i in customization_ids if i in self._items]

    def find_by_user_id(self, user_id: UUID, product_id: Optional[UUID] = None) -> List[Customization]:
        return [
            copy.deepcopy(c) for c in self._items.values()
            if c.user_id == user_id and (product_id is None or c.product_id == product_id)
        ]

    def delete(self, customization_id: UUID) -> bool:
        self.deleted.append(customization_id)
        return self._items.pop(customization_id, None) is not None

    def __len__(self):
        return len(self._items)


class FakeCatalog(ProductLookup, DesignLookup):

    def __init__(self):
        self.products: Dict[UUID, ProductSnapshot] = {}
        self.variants: Dict[UUID, VariantSnapshot] = {}
        self.designs: Dict[UUID, DesignSnapshot] = {}

    def add_product(self, base_price='20.00', name='Classic Tee', is_active=True) -> ProductSnapshot:
        product = ProductSnapshot(id=uuid4(), name=name, base_price=Decimal(base_price), is_active=is_active)
        self.products[product.id] = product
        return product

    def add_variant(self, product, additional_price='0.00', is_active=True) -> VariantSnapshot:
        variant = VariantSnapshot(
            id=uuid4(),
            product_id=product.id,
            additional_price=Decimal(additional_price),
            size='M',
            color='Navy',
            sku=f'SKU-{len(self.variants) + 1}',
            stock_quantity=10,
            is_active=is_active,
        )
        self.variants[variant.id] = variant
        return variant

    def add_design(self, is_active=True) -> DesignSnapshot:
        design = DesignSnapshot(id=uuid4(), name='Monogram', is_active=is_active)
        self.designs[design.id] = design
        return design

    def find_product(self, product_id):
        return self.products.get(product_id)

    def find_variant(self, variant_id):
        return self.variants.get(variant_id)

    def find_design(self, design_id):
        return self.designs.get(design_id)


class FixedPricingConfiguration(PricingConfiguration):

    def __init__(self, tax_rate='0.10', threshold='50.00', flat_fee='5.00', surcharge='10.00'):
        self.tax_rate = Decimal(tax_rate)
        self.rule = ShippingRule(threshold=Decimal(threshold), flat_fee=Decimal(flat_fee))
        self.surcharge = Decimal(surcharge)

    def get_tax_rate(self):
        return self.tax_rate

    def get_shipping_rule(self):
        return self.rule

    def get_customization_surcharge(self):
        return self.surcharge


class RecordingPreviewStore(PreviewImageStore):

    def __init__(self, fail_delete=False, fail_upload=False):
        self.fail_delete = fail_delete
        self.fail_upload = fail_upload
        self.uploads = []
        self.deletes = []

    def upload(self, content, owner_id, customization_id, content_type="image/png"):
        if self.fail_upload:
            raise RuntimeError("storage unavailable")
        self.uploads.append((owner_id, customization_id))
        return f"https://previews.example.com/customizations/{owner_id}/{customization_id}.png"

    def delete(self, key):
        self.deletes.append(key)
        if self.fail_delete:
            raise RuntimeError("storage unavailable")


@pytest.fixture
def catalog():
    return FakeCatalog()


@pytest.fixture
def pricing_config():
    return FixedPricingConfiguration()


@pytest.fixture
def cart_repository():
    return InMemoryCartRepository()


@pytest.fixture
def customization_repository():
    return InMemoryCustomizationRepository()


@pytest.fixture
def preview_store():
    return RecordingPreviewStore()


@pytest.fixture
def customization_service(customization_repository, catalog, pricing_config, preview_store):
    return CustomizationService(
        customization_repository=customization_repository,
        design_lookup=catalog,
        pricing_configuration=pricing_config,
        preview_store=preview_store,
    )


@pytest.fixture
def service_config():
    return CartServiceConfig(lock_timeout_seconds=5, lock_wait_seconds=2)


@pytest.fixture
def cart_service(cart_repository, catalog, pricing_config, customization_service, lock_manager, service_config):
    return CartService(
        cart_repository=cart_repository,
        product_lookup=catalog,
        pricing_configuration=pricing_config,
        customization_service=customization_service,
        lock_manager=lock_manager,
        config=service_config,
    )


@pytest.fixture
def user_id():
    return uuid4()
