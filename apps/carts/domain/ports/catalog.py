"""
Catalog lookups consumed by the cart.
"""
from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from ..value_objects.catalog import DesignSnapshot, ProductSnapshot, VariantSnapshot


class ProductLookup(ABC):
    """Read access to products and their variants."""

    @abstractmethod
    def find_product(self, product_id: UUID) -> Optional[ProductSnapshot]:
        """Find a product by ID."""
        pass

    @abstractmethod
    def find_variant(self, variant_id: UUID) -> Optional[VariantSnapshot]:
        """Find a product variant by ID."""
        pass


class DesignLookup(ABC):
    """Read access to designs."""

    @abstractmethod
    def find_design(self, design_id: UUID) -> Optional[DesignSnapshot]:
        """Find a design by ID."""
        pass
