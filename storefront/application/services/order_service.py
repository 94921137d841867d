"""
Order Service
=============

Application service that coordinates order-related operations.
This service orchestrates the order use cases.
"""
from decimal import Decimal
from typing import List, Optional, Union

from storefront.application.context import RequestContext
from storefront.application.dto.order_dto import OrderDetailResponse, OrderSummaryResponse
from storefront.application.use_cases.order.get_order_details import GetOrderDetailsUseCase
from storefront.application.use_cases.order.list_orders import ListOrdersUseCase
from storefront.application.use_cases.order.place_order import (
    CheckoutRequest,
    OrderReceipt,
    PlaceOrderUseCase,
)
from storefront.application.use_cases.order.resolve_identity import ResolveIdentityUseCase
from storefront.application.use_cases.order.track_order import TrackOrderUseCase
from storefront.application.use_cases.order.update_order_status import (
    ConfirmPaymentUseCase,
    UpdateOrderStatusUseCase,
    parse_status,
)
from storefront.domain.models.order import Order, OrderStatus
from storefront.domain.repositories.identity_repository import IdentityRepository
from storefront.domain.repositories.order_repository import OrderRepository
from storefront.domain.repositories.product_repository import ProductRepository
from storefront.domain.repositories.unit_of_work import UnitOfWorkFactory
from storefront.domain.repositories.website_repository import WebsiteRepository
from storefront.utils.event_notifier import OrderEventNotifier


class OrderService:
    """
    Application service for order operations.

    Provides a high-level interface over checkout, order queries and
    order administration.
    """

    def __init__(
        self,
        order_repository: OrderRepository,
        product_repository: ProductRepository,
        identity_repository: IdentityRepository,
        website_repository: WebsiteRepository,
        uow_factory: UnitOfWorkFactory,
        notifier: Optional[OrderEventNotifier] = None,
        strict_identity: bool = False,
        price_tolerance: Decimal = Decimal("0.01"),
        max_retries: int = 3,
    ):
        """
        Initialize service with repositories.

        Args:
            order_repository: Non-transactional order reads and id allocation
            product_repository: Non-transactional catalog reads
            identity_repository: Registered users
            website_repository: Tenants
            uow_factory: Creates units of work for writes
            notifier: Order event publisher
            strict_identity: Reject unverifiable session identities at checkout
            price_tolerance: Allowed caller/catalog amount difference
            max_retries: Retries after transaction write conflicts
        """
        self._identity_resolver = ResolveIdentityUseCase(identity_repository, strict=strict_identity)
        self._place_use_case = PlaceOrderUseCase(
            order_repository,
            self._identity_resolver,
            uow_factory,
            notifier=notifier,
            price_tolerance=price_tolerance,
            max_retries=max_retries,
        )
        self._details_use_case = GetOrderDetailsUseCase(
            order_repository, identity_repository, product_repository
        )
        self._list_use_case = ListOrdersUseCase(order_repository, identity_repository, website_repository)
        self._track_use_case = TrackOrderUseCase(order_repository, identity_repository, self._details_use_case)
        self._status_use_case = UpdateOrderStatusUseCase(uow_factory, notifier=notifier, max_retries=max_retries)
        self._payment_use_case = ConfirmPaymentUseCase(uow_factory, max_retries=max_retries)

    def place_order(self, request: CheckoutRequest, context: RequestContext) -> OrderReceipt:
        """
        Place an order (registered or guest checkout).

        Args:
            request: Checkout form
            context: Tenant and authenticated session

        Returns:
            Receipt with the new order id
        """
        return self._place_use_case.execute(request, context)

    def get_order(self, order_id: int) -> OrderDetailResponse:
        """
        Get an order with its items and customer.

        Args:
            order_id: Order identifier

        Returns:
            Order details
        """
        return self._details_use_case.execute(order_id)

    def list_orders(
        self,
        website_id: Optional[int] = None,
        status: Optional[Union[str, OrderStatus]] = None,
    ) -> List[OrderSummaryResponse]:
        """
        List all orders with optional filters.

        Args:
            website_id: Filter by tenant
            status: Filter by fulfillment status

        Returns:
            Order summaries, newest first
        """
        status_filter = parse_status(status) if status else None
        return self._list_use_case.execute(website_id=website_id, status=status_filter)

    def list_user_orders(self, owner_id: int) -> List[OrderSummaryResponse]:
        """List the orders of one registered user."""
        return self._list_use_case.execute(owner_id=owner_id)

    def track_order(self, order_ref: Union[int, str], email: str) -> OrderDetailResponse:
        """Look an order up by order number and contact e-mail."""
        return self._track_use_case.execute(order_ref, email)

    def update_order_status(self, order_id: int, status: Union[str, OrderStatus]) -> Order:
        """Move an order to a new fulfillment status."""
        return self._status_use_case.execute(order_id, status)

    def confirm_payment(self, order_id: int) -> Order:
        """Mark the payment of an order as completed."""
        return self._payment_use_case.execute(order_id)
