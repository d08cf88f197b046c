"""
Cart domain exceptions.
"""
from shared.domain.exceptions import EntityNotFoundError, ValidationError


class ProductNotFoundError(EntityNotFoundError):
    """Raised when a referenced product does not exist."""

    def __init__(self, product_id):
        super().__init__("Product", str(product_id), code="PRODUCT_NOT_FOUND")


class VariantNotFoundError(EntityNotFoundError):
    """Raised when a referenced product variant does not exist."""

    def __init__(self, variant_id):
        super().__init__("Variant", str(variant_id), code="VARIANT_NOT_FOUND")


class CartItemNotFoundError(EntityNotFoundError):
    """Raised when a cart line is not in the user's cart."""

    def __init__(self, item_id):
        super().__init__("Cart item", str(item_id), code="CART_ITEM_NOT_FOUND")


class DesignNotFoundError(EntityNotFoundError):
    """Raised when a referenced design does not exist."""

    def __init__(self, design_id):
        super().__init__("Design", str(design_id), code="DESIGN_NOT_FOUND")


class CustomizationNotFoundError(EntityNotFoundError):
    """Raised when a customization does not exist or is not visible to the user."""

    def __init__(self, customization_id):
        super().__init__("Customization", str(customization_id), code="CUSTOMIZATION_NOT_FOUND")


class InvalidQuantityError(ValidationError):
    """Raised when a quantity is outside the allowed range."""

    def __init__(self, quantity, message: str = None):
        super().__init__(
            message=message or f"Quantity must be greater than 0, got {quantity}",
            field="quantity",
            code="INVALID_QUANTITY",
        )
        self.quantity = quantity


class VariantMismatchError(ValidationError):
    """Raised when a variant does not belong to the requested product."""

    def __init__(self, variant_id, product_id):
        super().__init__(
            message=f"Variant '{variant_id}' does not belong to product '{product_id}'",
            field="variant_id",
            code="VARIANT_MISMATCH",
        )
        self.variant_id = variant_id
        self.product_id = product_id


class InvalidThreadColorError(ValidationError):
    """Raised when a thread color is not a #RRGGBB hex string."""

    def __init__(self, value):
        super().__init__(
            message=f"Thread color must be in hex format (#RRGGBB), got '{value}'",
            field="thread_color_hex",
            code="INVALID_THREAD_COLOR",
        )
        self.value = value


class InvalidCustomizationNotesError(ValidationError):
    """Raised when customization notes exceed the allowed length."""

    def __init__(self, max_length: int):
        super().__init__(
            message=f"Additional notes cannot exceed {max_length} characters",
            field="additional_notes",
            code="INVALID_CUSTOMIZATION_NOTES",
        )
        self.max_length = max_length


class EmptySyncBatchError(ValidationError):
    """Raised when a local cart sync carries no items."""

    def __init__(self):
        super().__init__(
            message="Local cart sync requires at least one item",
            field="items",
            code="EMPTY_SYNC_BATCH",
        )


class UnavailableItemError(ValidationError):
    """Raised when a product, variant or design exists but is not active."""

    def __init__(self, entity_name: str, entity_id):
        super().__init__(
            message=f"{entity_name} '{entity_id}' is not available",
            field=f"{entity_name.lower()}_id",
            code="ITEM_UNAVAILABLE",
        )
        self.entity_name = entity_name
        self.entity_id = entity_id


class CustomizationMismatchError(ValidationError):
    """Raised when a saved customization was made for another product or variant."""

    def __init__(self, customization_id, field: str):
        super().__init__(
            message=f"Customization '{customization_id}' does not match the requested {field}",
            field=field,
            code="CUSTOMIZATION_MISMATCH",
        )
        self.customization_id = customization_id


class CustomizationAlreadyInCartError(ValidationError):
    """Raised when a saved customization is already referenced by a cart line."""

    def __init__(self, customization_id):
        super().__init__(
            message=f"Customization '{customization_id}' is already in the cart",
            field="customization_id",
            code="CUSTOMIZATION_ALREADY_IN_CART",
        )
        self.customization_id = customization_id
