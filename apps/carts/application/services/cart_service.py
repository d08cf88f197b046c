"""
Cart mutation service.

Every write runs the same protocol under a per-user distributed lock:

    LOCK_PENDING -> LOCKED -> LOADED -> VALIDATED -> MUTATED -> PERSISTED -> UNLOCKED

Any failure jumps straight to UNLOCKED; the lock is released on every path.
Reads do not take the lock except to create a missing cart.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Optional, Sequence, Set
from uuid import UUID

from shared.application import is_set
from shared.domain.exceptions import ValidationError
from shared.infrastructure.locks import DistributedLockManager, cart_lock_key
from ...domain.entities.cart import Cart
from ...domain.entities.cart_item import CartItem
from ...domain.entities.customization import Customization
from ...domain.events import CartItemRemoved, LocalCartSynced
from ...domain.exceptions import (
    CustomizationAlreadyInCartError,
    EmptySyncBatchError,
    InvalidQuantityError,
    ProductNotFoundError,
    UnavailableItemError,
    VariantMismatchError,
    VariantNotFoundError,
)
from ...domain.ports.catalog import ProductLookup
from ...domain.ports.pricing_configuration import PricingConfiguration
from ...domain.repositories.cart_repository import CartRepository
from ...domain.services import pricing
from ...domain.value_objects.catalog import ProductSnapshot, VariantSnapshot
from ..config import CartServiceConfig
from ..dtos.cart_dto import AddToCartDTO, CartDTO, CartItemPatch, CartSummaryDTO
from .customization_service import CustomizationService

logger = logging.getLogger(__name__)


class MutationStage(Enum):
    LOCK_PENDING = "lock_pending"
    LOCKED = "locked"
    LOADED = "loaded"
    VALIDATED = "validated"
    MUTATED = "mutated"
    PERSISTED = "persisted"
    UNLOCKED = "unlocked"


@dataclass
class MutationContext:
    """State of one in-flight mutation."""
    user_id: UUID
    operation: str
    cart: Optional[Cart] = None
    created_customizations: List[Customization] = field(default_factory=list)
    claimed_customization_ids: Set[UUID] = field(default_factory=set)
    # Loaded state of customizations edited in place, restored if the mutation fails
    previous_customizations: List[Customization] = field(default_factory=list)


class CartService:
    """
    Cart business logic service for authenticated users.

    Guest carts live on the client and reach the server through
    sync_local_cart at login.
    """

    def __init__(
        self,
        cart_repository: CartRepository,
        product_lookup: ProductLookup,
        pricing_configuration: PricingConfiguration,
        customization_service: CustomizationService,
        lock_manager: DistributedLockManager,
        config: Optional[CartServiceConfig] = None,
    ):
        self.cart_repository = cart_repository
        self.product_lookup = product_lookup
        self.pricing_configuration = pricing_configuration
        self.customization_service = customization_service
        self.lock_manager = lock_manager
        self.config = config or CartServiceConfig()

    # ==================== READS ====================

    def get_cart(self, user_id: UUID) -> CartDTO:
        """Get the user's cart priced with the current configuration."""
        logger.debug(f"Fetching cart for user: {user_id}")
        cart = self._load_for_read(user_id)
        return self._to_dto(cart)

    def get_summary(self, user_id: UUID) -> CartSummaryDTO:
        """Get the totals of the user's cart priced with the current configuration."""
        cart = self._load_for_read(user_id)
        return CartSummaryDTO.from_entity(cart)

    # ==================== WRITES ====================

    def add_item(self, user_id: UUID, request: AddToCartDTO) -> CartDTO:
        """Add a product (optionally a variant and an inline customization) to the cart."""
        logger.info(
            f"Adding item to cart - user_id: {user_id}, product_id: {request.product_id}, "
            f"quantity: {request.quantity}"
        )

        def prepare(ctx: MutationContext) -> CartItem:
            return self._build_line(ctx, request)

        def apply(ctx: MutationContext, line: CartItem) -> None:
            ctx.cart.add_item(line)

        cart = self._mutate(user_id, "add_item", prepare, apply)
        return self._to_dto(cart)

    def update_item(self, user_id: UUID, item_id: UUID, quantity: int) -> CartDTO:
        """Set the quantity of a cart line."""
        return self.patch_item(user_id, item_id, CartItemPatch(quantity=quantity))

    def patch_item(self, user_id: UUID, item_id: UUID, patch: CartItemPatch) -> CartDTO:
        """Apply the supplied fields of a partial line update."""
        if patch.is_empty:
            raise ValidationError("No fields to update", field="item")

        def prepare(ctx: MutationContext) -> Optional[Customization]:
            item = ctx.cart.get_item(item_id)
            if is_set(patch.quantity):
                self._validate_quantity(patch.quantity)
            if not is_set(patch.additional_notes):
                return None
            if not item.is_customized:
                raise ValidationError(
                    "Only customized items have notes", field="additional_notes"
                )
            return self.customization_service.get(user_id, item.customization_id)

        def apply(ctx: MutationContext, customization: Optional[Customization]) -> None:
            if is_set(patch.quantity):
                ctx.cart.update_quantity(item_id, patch.quantity)
            if customization is not None:
                ctx.previous_customizations.append(customization)
                self.customization_service.update_notes(customization, patch.additional_notes)

        cart = self._mutate(user_id, "update_item", prepare, apply)
        logger.info(f"Updated item - user_id: {user_id}, item_id: {item_id}")
        return self._to_dto(cart)

    def remove_item(self, user_id: UUID, item_id: UUID) -> CartDTO:
        """Remove a line; its customization and preview are cleaned up."""

        def prepare(ctx: MutationContext) -> None:
            ctx.cart.get_item(item_id)

        def apply(ctx: MutationContext, _: Any) -> None:
            ctx.cart.remove_item(item_id)

        cart = self._mutate(user_id, "remove_item", prepare, apply)
        logger.info(f"Removed item - user_id: {user_id}, item_id: {item_id}")
        return self._to_dto(cart)

    def clear(self, user_id: UUID) -> CartDTO:
        """Remove every line from the cart."""
        logger.info(f"Clearing cart for user: {user_id}")

        def apply(ctx: MutationContext, _: Any) -> None:
            removed = ctx.cart.clear()
            logger.info(f"Cart cleared - user_id: {user_id}, items_removed: {len(removed)}")

        cart = self._mutate(user_id, "clear", lambda ctx: None, apply)
        return self._to_dto(cart)

    def sync_local_cart(self, user_id: UUID, items: Sequence[AddToCartDTO]) -> CartDTO:
        """
        Merge a client-side cart into the server cart.

        The whole batch runs under one lock acquisition with a single totals
        recomputation and a single persist.
        """
        if not items:
            raise EmptySyncBatchError()

        logger.info(f"Syncing local cart - user_id: {user_id}, item_count: {len(items)}")

        def prepare(ctx: MutationContext) -> List[CartItem]:
            return [self._build_line(ctx, item) for item in items]

        def apply(ctx: MutationContext, lines: List[CartItem]) -> None:
            initial_count = len(ctx.cart.items)
            ctx.cart.add_items(lines)
            ctx.cart.add_domain_event(
                LocalCartSynced(
                    cart_id=ctx.cart.id,
                    items_received=len(lines),
                    lines_added=len(ctx.cart.items) - initial_count,
                )
            )

        cart = self._mutate(user_id, "sync_local_cart", prepare, apply)
        logger.info(f"Local cart synced - user_id: {user_id}, total_lines: {len(cart.items)}")
        return self._to_dto(cart)

    # ==================== MUTATION PROTOCOL ====================

    def _mutate(
        self,
        user_id: UUID,
        operation: str,
        prepare: Callable[[MutationContext], Any],
        apply: Callable[[MutationContext, Any], None],
    ) -> Cart:
        ctx = MutationContext(user_id=user_id, operation=operation)
        key = cart_lock_key(user_id)

        locked = False
        self._stage(ctx, MutationStage.LOCK_PENDING)
        try:
            with self.lock_manager.hold(
                key,
                ttl=self.config.lock_timeout_seconds,
                max_wait=self.config.lock_wait_seconds,
            ):
                locked = True
                self._stage(ctx, MutationStage.LOCKED)
                return self._run_locked(ctx, prepare, apply)
        finally:
            if locked:
                self._stage(ctx, MutationStage.UNLOCKED)

    def _run_locked(
        self,
        ctx: MutationContext,
        prepare: Callable[[MutationContext], Any],
        apply: Callable[[MutationContext, Any], None],
    ) -> Cart:
        try:
            ctx.cart = self._load_or_create(ctx.user_id)
            ctx.cart.apply_pricing(
                self.pricing_configuration.get_tax_rate(),
                self.pricing_configuration.get_shipping_rule(),
            )
            ctx.cart.clear_domain_events()
            self._stage(ctx, MutationStage.LOADED)

            payload = prepare(ctx)
            self._stage(ctx, MutationStage.VALIDATED)

            apply(ctx, payload)
            ctx.cart.extend_expiry(self.config.expiry_days)
            self._stage(ctx, MutationStage.MUTATED)

            events = ctx.cart.clear_domain_events()
            saved = self.cart_repository.save(ctx.cart)
            self._stage(ctx, MutationStage.PERSISTED)
        except Exception:
            self._restore_customizations(ctx)
            self._discard_created_customizations(ctx)
            raise

        self._dispatch(events)
        return saved

    def _load_or_create(self, user_id: UUID) -> Cart:
        cart = self.cart_repository.find_by_user_id(user_id)
        if cart is None:
            logger.info(f"Creating new cart for user: {user_id}")
            cart = Cart.create(user_id, expiry_days=self.config.expiry_days)
        return cart

    def _load_for_read(self, user_id: UUID) -> Cart:
        cart = self.cart_repository.find_by_user_id(user_id)
        if cart is None:
            cart = self._create_cart(user_id)
        # In-memory only; the next write persists current pricing.
        cart.reprice(
            self.pricing_configuration.get_tax_rate(),
            self.pricing_configuration.get_shipping_rule(),
        )
        return cart

    def _create_cart(self, user_id: UUID) -> Cart:
        with self.lock_manager.hold(
            cart_lock_key(user_id),
            ttl=self.config.lock_timeout_seconds,
            max_wait=self.config.lock_wait_seconds,
        ):
            cart = self.cart_repository.find_by_user_id(user_id)
            if cart is not None:
                return cart
            cart = self.cart_repository.save(
                Cart.create(user_id, expiry_days=self.config.expiry_days)
            )
            logger.info(f"Cart created - cart_id: {cart.id}, user_id: {user_id}")
            return cart

    def _dispatch(self, events: list) -> None:
        for event in events:
            logger.debug(f"Cart event: {event.event_type}")
            if isinstance(event, CartItemRemoved) and event.customization_id is not None:
                self._cleanup_customization(event.customization_id)

    def _cleanup_customization(self, customization_id: UUID) -> None:
        try:
            self.customization_service.discard(customization_id)
        except Exception as e:
            logger.error(f"Failed to clean up customization {customization_id}: {e}", exc_info=True)

    def _discard_created_customizations(self, ctx: MutationContext) -> None:
        for customization in ctx.created_customizations:
            self._cleanup_customization(customization.id)

    def _restore_customizations(self, ctx: MutationContext) -> None:
        for customization in ctx.previous_customizations:
            try:
                self.customization_service.restore(customization)
            except Exception as e:
                logger.error(f"Failed to restore customization {customization.id}: {e}", exc_info=True)

    @staticmethod
    def _stage(ctx: MutationContext, stage: MutationStage) -> None:
        logger.debug(f"[{ctx.operation}] user {ctx.user_id}: {stage.value}")

    # ==================== HELPERS ====================

    def _build_line(self, ctx: MutationContext, request: AddToCartDTO) -> CartItem:
        self._validate_quantity(request.quantity)
        if request.customization is not None and request.customization_id is not None:
            raise ValidationError(
                "Send either customization data or a customization_id, not both",
                field="customization_id",
            )
        product = self._resolve_product(request.product_id)
        variant = self._resolve_variant(request.variant_id, product)

        customization = None
        if request.customization_id is not None:
            customization = self._claim_saved_customization(ctx, request.customization_id, product, variant)
        elif request.customization is not None:
            data = request.customization
            customization = self.customization_service.attach(
                user_id=ctx.user_id,
                product_id=product.id,
                variant_id=variant.id if variant else None,
                design_id=data.design_id,
                thread_color_hex=data.thread_color_hex,
                additional_notes=data.additional_notes,
                preview_image=data.preview_image,
            )
            ctx.created_customizations.append(customization)

        return CartItem(
            product_id=product.id,
            product_name=product.name,
            unit_price=pricing.compute_unit_price(
                product.base_price, variant.additional_price if variant else None
            ),
            quantity=request.quantity,
            variant_id=variant.id if variant else None,
            customization_id=customization.id if customization else None,
            customization_surcharge=self.customization_service.surcharge_for(customization),
        )

    def _claim_saved_customization(
        self,
        ctx: MutationContext,
        customization_id: UUID,
        product: ProductSnapshot,
        variant: Optional[VariantSnapshot],
    ) -> Customization:
        # One line per saved customization; removing the line discards it
        if customization_id in ctx.claimed_customization_ids or customization_id in ctx.cart.customization_ids:
            raise CustomizationAlreadyInCartError(customization_id)
        customization = self.customization_service.resolve_for_line(
            ctx.user_id,
            customization_id,
            product.id,
            variant.id if variant else None,
        )
        ctx.claimed_customization_ids.add(customization_id)
        return customization

    def _resolve_product(self, product_id: UUID) -> ProductSnapshot:
        product = self.product_lookup.find_product(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        if not product.is_active:
            raise UnavailableItemError("Product", product_id)
        return product

    def _resolve_variant(self, variant_id: Optional[UUID], product: ProductSnapshot) -> Optional[VariantSnapshot]:
        if variant_id is None:
            return None
        variant = self.product_lookup.find_variant(variant_id)
        if variant is None:
            raise VariantNotFoundError(variant_id)
        if not variant.belongs_to(product.id):
            raise VariantMismatchError(variant_id, product.id)
        if not variant.is_active:
            raise UnavailableItemError("Variant", variant_id)
        return variant

    def _validate_quantity(self, quantity) -> None:
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity <= 0:
            raise InvalidQuantityError(quantity)
        limit = self.config.max_quantity_per_request
        if quantity > limit:
            raise InvalidQuantityError(quantity, message=f"Quantity cannot exceed {limit}")

    def _to_dto(self, cart: Cart) -> CartDTO:
        customizations = self.customization_service.find_many(cart.customization_ids)
        return CartDTO.from_entity(cart, customizations)
