"""
Order Repository Interface
==========================

Abstract interface for order data access.
Implementations should be in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from storefront.domain.models.order import Order, OrderLine, OrderStatus, PaymentStatus


class OrderRepository(ABC):
    """
    Abstract repository for order persistence operations.

    Orders and their lines are only ever created together inside a unit of
    work; afterwards only statuses change.
    """

    @abstractmethod
    def next_id(self) -> int:
        """
        Allocate a new order identifier.

        Identifiers are never reused, even if the order that asked for one
        is rolled back.
        """
        pass

    @abstractmethod
    def insert(self, order: Order) -> Order:
        """
        Insert an order header (without its lines).

        Args:
            order: Order entity with an allocated id

        Returns:
            The stored order
        """
        pass

    @abstractmethod
    def insert_line(self, line: OrderLine) -> OrderLine:
        """
        Insert one line item of an already inserted order.

        Args:
            line: Line item referencing its parent order

        Returns:
            The stored line
        """
        pass

    @abstractmethod
    def find_by_id(self, order_id: int) -> Optional[Order]:
        """
        Find an order by its ID, with its lines loaded.

        Args:
            order_id: Order identifier

        Returns:
            Order entity if found, None otherwise
        """
        pass

    @abstractmethod
    def list(
        self,
        website_id: Optional[int] = None,
        owner_id: Optional[int] = None,
        status: Optional[OrderStatus] = None,
    ) -> List[Order]:
        """
        List orders, newest first. Lines are not loaded.

        Args:
            website_id: Only orders of this tenant
            owner_id: Only orders of this registered user
            status: Only orders in this fulfillment status

        Returns:
            List of order entities
        """
        pass

    @abstractmethod
    def update_status(self, order_id: int, status: OrderStatus) -> bool:
        """
        Overwrite the fulfillment status. Transition rules are enforced by the caller.

        Returns:
            True if the order was found, False otherwise
        """
        pass

    @abstractmethod
    def update_payment_status(self, order_id: int, payment_status: PaymentStatus) -> bool:
        """
        Overwrite the payment status.

        Returns:
            True if the order was found, False otherwise
        """
        pass
