"""
Order Domain Exceptions
=======================

Raised by use cases when business rules are violated.
The API layer catches these and translates them into HTTP responses.
"""
from typing import Optional


class OrderError(Exception):
    """Base class for every order-related failure."""


class OrderValidationError(OrderError):
    """The checkout request is malformed; nothing was written."""


class InvalidLineItem(OrderValidationError):
    """A line item is missing, references an unknown product, or has a non-positive quantity."""

    def __init__(self, message: str, product_id: Optional[int] = None):
        super().__init__(message)
        self.product_id = product_id


class MissingContact(OrderValidationError):
    """Guest order without an e-mail address: it could never be looked up again."""


class PriceMismatch(OrderValidationError):
    """Caller-supplied price or total disagrees with the catalog."""


class UnsupportedPaymentMethod(OrderValidationError):
    """Payment method is not one of the accepted values."""


class IdentityUnresolvable(OrderError):
    """A claimed owner could not be verified against the identity store."""

    def __init__(self, claimed_owner_id: int, reason: str = "not found"):
        super().__init__(f"Identity {claimed_owner_id} could not be verified: {reason}")
        self.claimed_owner_id = claimed_owner_id
        self.reason = reason


class InsufficientStock(OrderError):
    """Requested quantity exceeds the available stock of a product."""

    def __init__(self, product_id: int, requested: int):
        super().__init__(f"Insufficient stock for product {product_id}: requested {requested}")
        self.product_id = product_id
        self.requested = requested


class OrderNotFound(OrderError):
    """The requested order does not exist (or the caller may not see it)."""

    def __init__(self, order_ref):
        super().__init__(f"Order '{order_ref}' not found")
        self.order_ref = order_ref


class InvalidStatusTransition(OrderError):
    """An illegal fulfillment or payment status change was attempted."""


class ConcurrentUpdateError(OrderError):
    """A transaction lost a write conflict with a concurrent one and may be retried."""


class PersistenceFailure(OrderError):
    """A storage error aborted an operation; all of its writes were rolled back."""

    def __init__(
        self,
        step: str,
        order_id: Optional[int] = None,
        cause: Optional[BaseException] = None,
        action: str = "placed",
    ):
        super().__init__(f"Order could not be {action} (failed at step '{step}')")
        self.step = step
        self.order_id = order_id
        self.cause = cause
        self.action = action
