"""
Order Controller
================

FastAPI controller for checkout, order tracking and order administration.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from storefront.api.v1.dependencies import (
    get_order_service,
    get_request_context,
    get_session_owner_id,
)
from storefront.application.context import RequestContext
from storefront.application.dto.order_dto import (
    OrderDetailResponse,
    OrderReceiptResponse,
    OrderStatusResponse,
    OrderSummaryResponse,
    PlaceOrderRequest,
    TrackOrderRequest,
    UpdateOrderStatusRequest,
)
from storefront.application.services.order_service import OrderService
from storefront.application.use_cases.order.place_order import CheckoutItem, CheckoutRequest
from storefront.domain.exceptions import (
    ConcurrentUpdateError,
    IdentityUnresolvable,
    InsufficientStock,
    InvalidStatusTransition,
    OrderError,
    OrderNotFound,
    OrderValidationError,
    PersistenceFailure,
    PriceMismatch,
)
from storefront.domain.models.order import ORDER_NUMBER_PREFIX

logger = logging.getLogger(__name__)

router = APIRouter(tags=["orders"])


def _http_error(e: OrderError) -> HTTPException:
    """Translate a domain exception into the matching HTTP error."""
    if isinstance(e, PriceMismatch):
        return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    if isinstance(e, OrderValidationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    if isinstance(e, IdentityUnresolvable):
        return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    if isinstance(e, OrderNotFound):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    if isinstance(e, (InsufficientStock, InvalidStatusTransition)):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    if isinstance(e, ConcurrentUpdateError):
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="The order could not be saved because of concurrent updates. Please try again.",
        )
    if isinstance(e, PersistenceFailure):
        if e.action == "placed":
            detail = "Failed to place order. Please try again."
        else:
            detail = f"Order could not be {e.action}. Please try again."
        if e.order_id is not None:
            detail = f"{detail} Reference: {ORDER_NUMBER_PREFIX}{e.order_id}"
        return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)

    logger.error("Unmapped order error: %s", e)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal error")


@router.post(
    "/create",
    response_model=OrderReceiptResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Place an order",
    description="""
    Place an order for a registered user or a guest.

    The owner is the session user (X-User-Id). A body `user_id` that differs
    from the session user is rejected with 401. Without a session the body
    `user_id` is used, and an unverifiable claim falls back to a guest order.
    Guests must supply `guest_email`. Products of another website are rejected.

    Prices are taken from the catalog; the submitted prices and total must
    agree with it. The order, its items, the stock decrements and the cart
    cleanup are committed together or not at all.
    """
)
def create_order(
    request: PlaceOrderRequest,
    context: RequestContext = Depends(get_request_context),
    service: OrderService = Depends(get_order_service),
) -> OrderReceiptResponse:
    """Place an order."""
    checkout = CheckoutRequest(
        items=[
            CheckoutItem(product_id=item.product_id, quantity=item.quantity, price=item.price)
            for item in request.items
        ],
        total_amount=request.total_amount,
        shipping_address=request.shipping_address,
        payment_method=request.payment_method,
        user_id=request.user_id,
        guest_name=request.guest_name,
        guest_email=str(request.guest_email) if request.guest_email else None,
        guest_phone=request.guest_phone,
    )
    try:
        receipt = service.place_order(checkout, context)
    except OrderError as e:
        raise _http_error(e)

    return OrderReceiptResponse(
        order_id=receipt.order_id,
        order_number=receipt.order_number,
        total_amount=receipt.total_amount,
        payment_status=receipt.payment_status,
        status=receipt.status,
    )


@router.get(
    "/list",
    response_model=List[OrderSummaryResponse],
    summary="List orders",
    description="Get all orders, newest first, optionally filtered by website_id or status."
)
def list_orders(
    website_id: Optional[int] = None,
    status_filter: Optional[str] = None,
    service: OrderService = Depends(get_order_service),
) -> List[OrderSummaryResponse]:
    """List orders with optional filters."""
    try:
        return service.list_orders(website_id=website_id, status=status_filter)
    except InvalidStatusTransition as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except OrderError as e:
        raise _http_error(e)


@router.get(
    "/mine",
    response_model=List[OrderSummaryResponse],
    summary="List my orders",
    description="Get the orders of the authenticated session user (X-User-Id)."
)
def list_my_orders(
    owner_id: int = Depends(get_session_owner_id),
    service: OrderService = Depends(get_order_service),
) -> List[OrderSummaryResponse]:
    """List the session user's orders."""
    return service.list_user_orders(owner_id)


@router.post(
    "/track",
    response_model=OrderDetailResponse,
    summary="Track an order",
    description="""
    Look an order up by order number (e.g. `ORD-42` or `42`) and e-mail.

    The e-mail must match the guest e-mail or the owner's registered e-mail;
    otherwise the order is reported as not found.
    """
)
def track_order(
    request: TrackOrderRequest,
    service: OrderService = Depends(get_order_service),
) -> OrderDetailResponse:
    """Track an order."""
    try:
        return service.track_order(request.order_id, request.email)
    except OrderError as e:
        raise _http_error(e)


@router.get(
    "/get/{order_id}",
    response_model=OrderDetailResponse,
    summary="Get order by ID",
    description="Get an order with its items, product names and customer."
)
def get_order(
    order_id: int,
    service: OrderService = Depends(get_order_service),
) -> OrderDetailResponse:
    """Get order by ID."""
    try:
        return service.get_order(order_id)
    except OrderError as e:
        raise _http_error(e)


@router.put(
    "/{order_id}/status",
    response_model=OrderStatusResponse,
    summary="Update order status",
    description="""
    Move an order to a new status.

    Allowed: pending → processing | cancelled, processing → shipped | cancelled,
    shipped → delivered. Cancelling returns the ordered units to stock.
    """
)
def update_order_status(
    order_id: int,
    request: UpdateOrderStatusRequest,
    service: OrderService = Depends(get_order_service),
) -> OrderStatusResponse:
    """Update order status."""
    try:
        order = service.update_order_status(order_id, request.status)
    except OrderError as e:
        raise _http_error(e)

    return OrderStatusResponse(
        order_id=order.id,
        status=order.status.value,
        payment_status=order.payment_status.value,
        message=f"Order {order.order_number} is now {order.status.value}",
    )


@router.post(
    "/{order_id}/confirm-payment",
    response_model=OrderStatusResponse,
    summary="Confirm payment",
    description="Mark the payment of an order (e.g. cash on delivery) as completed."
)
def confirm_payment(
    order_id: int,
    service: OrderService = Depends(get_order_service),
) -> OrderStatusResponse:
    """Confirm the payment of an order."""
    try:
        order = service.confirm_payment(order_id)
    except OrderError as e:
        raise _http_error(e)

    return OrderStatusResponse(
        order_id=order.id,
        status=order.status.value,
        payment_status=order.payment_status.value,
        message=f"Payment for order {order.order_number} confirmed",
    )
