"""
Order Model
===========

Domain model representing a placed order and its line items.
This is a pure domain object with no infrastructure dependencies.
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, FrozenSet, List, Optional

from storefront.domain.exceptions import InvalidStatusTransition, UnsupportedPaymentMethod
from storefront.utils.datetime_utils import now


class OrderStatus(str, Enum):
    """Fulfillment states of an order."""
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentMethod(str, Enum):
    COD = "COD"
    PAYPAL = "PayPal"
    CARD = "Card"

    @classmethod
    def parse(cls, value: Optional[str]) -> "PaymentMethod":
        """Parse a payment method; missing or blank means cash on delivery."""
        if value is None or not value.strip():
            return cls.COD
        try:
            return cls(value.strip())
        except ValueError:
            accepted = ", ".join(m.value for m in cls)
            raise UnsupportedPaymentMethod(
                f"Unsupported payment method '{value}' (accepted: {accepted})"
            )


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"


ALLOWED_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

ORDER_NUMBER_PREFIX = "ORD-"


def initial_payment_status(method: PaymentMethod) -> PaymentStatus:
    """PayPal is captured by the storefront before checkout; everything else is collected later."""
    if method is PaymentMethod.PAYPAL:
        return PaymentStatus.COMPLETED
    return PaymentStatus.PENDING


@dataclass
class OrderLine:
    """One product/quantity entry of an order, with the unit price fixed at purchase time."""
    order_id: int
    product_id: int
    quantity: int
    price: Decimal

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity


@dataclass
class Order:
    """
    Order domain model.

    owner_id is None for guest orders; guest contact fields are only kept
    for those. An order always has either an owner or a guest e-mail.
    """
    id: int
    website_id: int
    total_amount: Decimal
    shipping_address: str
    payment_method: PaymentMethod = PaymentMethod.COD
    payment_status: PaymentStatus = PaymentStatus.PENDING
    status: OrderStatus = OrderStatus.PENDING
    owner_id: Optional[int] = None
    guest_name: Optional[str] = None
    guest_email: Optional[str] = None
    guest_phone: Optional[str] = None
    created_at: datetime = field(default_factory=lambda: now())
    updated_at: datetime = field(default_factory=lambda: now())
    lines: List[OrderLine] = field(default_factory=list)

    @property
    def order_number(self) -> str:
        return f"{ORDER_NUMBER_PREFIX}{self.id}"

    def is_guest(self) -> bool:
        return self.owner_id is None

    def can_transition_to(self, new_status: OrderStatus) -> bool:
        return new_status in ALLOWED_TRANSITIONS[self.status]

    def transition_to(self, new_status: OrderStatus) -> OrderStatus:
        """Move to a new fulfillment status. Returns the previous status."""
        if not self.can_transition_to(new_status):
            raise InvalidStatusTransition(
                f"Order {self.id} cannot go from '{self.status.value}' to '{new_status.value}'"
            )
        previous = self.status
        self.status = new_status
        self.updated_at = now()
        return previous

    def confirm_payment(self) -> None:
        if self.status is OrderStatus.CANCELLED:
            raise InvalidStatusTransition(f"Order {self.id} is cancelled")
        if self.payment_status is PaymentStatus.COMPLETED:
            raise InvalidStatusTransition(f"Payment for order {self.id} is already completed")
        self.payment_status = PaymentStatus.COMPLETED
        self.updated_at = now()
