from .resolve_identity import ClaimSource, ResolveIdentityUseCase
from .place_order import CheckoutItem, CheckoutRequest, OrderReceipt, PlaceOrderUseCase
from .get_order_details import GetOrderDetailsUseCase
from .list_orders import ListOrdersUseCase
from .track_order import TrackOrderUseCase
from .update_order_status import ConfirmPaymentUseCase, UpdateOrderStatusUseCase

__all__ = [
    "ClaimSource",
    "ResolveIdentityUseCase",
    "CheckoutItem",
    "CheckoutRequest",
    "OrderReceipt",
    "PlaceOrderUseCase",
    "GetOrderDetailsUseCase",
    "ListOrdersUseCase",
    "TrackOrderUseCase",
    "ConfirmPaymentUseCase",
    "UpdateOrderStatusUseCase",
]
