"""
Unit of Work Interface
======================

Groups the writes of one business operation into a single atomic
transaction. Used as a context manager:

    with uow_factory() as uow:
        uow.orders.insert(order)
        uow.products.decrement_stock(product_id, quantity)
        uow.commit()

Leaving the block without commit() (including by an exception) rolls
everything back.
"""
from abc import ABC, abstractmethod
from typing import Callable

from storefront.domain.repositories.cart_repository import CartRepository
from storefront.domain.repositories.order_repository import OrderRepository
from storefront.domain.repositories.product_repository import ProductRepository


class UnitOfWork(ABC):
    """Transactional view over the order, product and cart stores."""

    orders: OrderRepository
    products: ProductRepository
    carts: CartRepository

    def __enter__(self) -> "UnitOfWork":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        # No-op when commit() already ran
        self.rollback()

    @abstractmethod
    def commit(self) -> None:
        """Make every write of this unit durable and visible."""
        pass

    @abstractmethod
    def rollback(self) -> None:
        """Discard every uncommitted write. Safe to call more than once."""
        pass


UnitOfWorkFactory = Callable[[], UnitOfWork]
