"""
Product Repository Interface
============================

Catalog/inventory access needed by order placement.
"""
from abc import ABC, abstractmethod
from typing import Dict, Iterable, Optional

from storefront.domain.models.product import Product


class ProductRepository(ABC):
    """Abstract repository over the catalog store."""

    @abstractmethod
    def find_by_id(self, product_id: int) -> Optional[Product]:
        """
        Find a product by its ID.

        Returns:
            Product entity if found, None otherwise
        """
        pass

    @abstractmethod
    def find_by_ids(self, product_ids: Iterable[int]) -> Dict[int, Product]:
        """
        Find several products at once.

        Returns:
            Mapping of product id to product for the ids that exist
        """
        pass

    @abstractmethod
    def decrement_stock(self, product_id: int, quantity: int) -> bool:
        """
        Atomically decrement stock if at least `quantity` units are available.

        Returns:
            True if the stock was decremented, False if there was not enough
            stock (or no such product). Stock never goes below zero.
        """
        pass

    @abstractmethod
    def increment_stock(self, product_id: int, quantity: int) -> bool:
        """
        Return units to stock (order cancellation).

        Returns:
            True if the product was found
        """
        pass
