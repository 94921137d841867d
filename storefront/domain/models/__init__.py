from .order import (
    Order,
    OrderLine,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    ALLOWED_TRANSITIONS,
)
from .product import Product
from .identity import Identity
from .website import Website

__all__ = [
    "Order",
    "OrderLine",
    "OrderStatus",
    "PaymentMethod",
    "PaymentStatus",
    "ALLOWED_TRANSITIONS",
    "Product",
    "Identity",
    "Website",
]
