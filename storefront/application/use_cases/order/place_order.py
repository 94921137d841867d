"""
Place Order Use Case
====================

Business use case for checkout: turns a cart into an order, its line
items and the matching stock decrements, all in one transaction.
"""
import logging
from dataclasses import asdict, dataclass, field
from decimal import Decimal
from typing import List, Optional

from storefront.application.context import RequestContext
from storefront.application.use_cases.order.resolve_identity import ClaimSource, ResolveIdentityUseCase
from storefront.application.use_cases.order.retry import retry_on_conflict
from storefront.domain.exceptions import (
    IdentityUnresolvable,
    InsufficientStock,
    InvalidLineItem,
    MissingContact,
    OrderError,
    OrderValidationError,
    PersistenceFailure,
    PriceMismatch,
)
from storefront.domain.models.identity import Identity
from storefront.domain.models.order import Order, OrderLine, PaymentMethod, initial_payment_status
from storefront.domain.repositories.order_repository import OrderRepository
from storefront.domain.repositories.unit_of_work import UnitOfWorkFactory
from storefront.utils.event_notifier import OrderEventNotifier
from storefront.utils.money import amounts_match, to_money

logger = logging.getLogger(__name__)


@dataclass
class CheckoutItem:
    product_id: int
    quantity: int
    price: Optional[Decimal] = None


@dataclass
class CheckoutRequest:
    """Checkout form as submitted by the storefront."""
    items: List[CheckoutItem]
    total_amount: Decimal
    shipping_address: str
    payment_method: Optional[str] = None
    user_id: Optional[int] = None
    guest_name: Optional[str] = None
    guest_email: Optional[str] = None
    guest_phone: Optional[str] = None


@dataclass
class OrderReceipt:
    order_id: int
    order_number: str
    total_amount: Decimal
    payment_status: str
    status: str
    lines: List[OrderLine] = field(default_factory=list)


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class PlaceOrderUseCase:
    """
    Use case for placing an order.

    Validation happens before anything is written. The order header, its
    lines, the stock decrements and the cart cleanup are one unit of work:
    either all of them are committed or none is.
    """

    def __init__(
        self,
        order_repository: OrderRepository,
        identity_resolver: ResolveIdentityUseCase,
        uow_factory: UnitOfWorkFactory,
        notifier: Optional[OrderEventNotifier] = None,
        price_tolerance: Decimal = Decimal("0.01"),
        max_retries: int = 3,
    ):
        """
        Initialize use case.

        Args:
            order_repository: Used outside the transaction to allocate order ids
            identity_resolver: Resolves the order owner
            uow_factory: Creates the unit of work the order is written in
            notifier: Publishes order.placed after commit
            price_tolerance: Allowed difference between caller and catalog amounts
            max_retries: Retries after a transaction lost a write conflict
        """
        self._order_repository = order_repository
        self._identity_resolver = identity_resolver
        self._uow_factory = uow_factory
        self._notifier = notifier
        self._price_tolerance = price_tolerance
        self._max_retries = max_retries

    def execute(self, request: CheckoutRequest, context: RequestContext) -> OrderReceipt:
        """
        Execute the place order use case.

        Args:
            request: Checkout form
            context: Tenant and authenticated session of the request

        Returns:
            Receipt of the committed order

        Raises:
            OrderValidationError: Malformed request, nothing written
            IdentityUnresolvable: Body claim contradicts the session, or strict
                identity mode rejected the session claim
            InsufficientStock: A line asked for more than is in stock
            ConcurrentUpdateError: Still conflicting after all retries
            PersistenceFailure: Storage error, everything rolled back
        """
        self._validate(request)
        payment_method = PaymentMethod.parse(request.payment_method)

        owner = self._resolve_owner(request, context)
        guest_email = _clean(request.guest_email)
        if owner is None and guest_email is None:
            raise MissingContact("Guest checkout requires an e-mail address")

        try:
            order_id = self._order_repository.next_id()
        except Exception as e:
            logger.error("Could not allocate an order id: %s", e, exc_info=True)
            raise PersistenceFailure("allocate_id", None, e) from e

        order = retry_on_conflict(
            lambda: self._place(order_id, request, context, owner, payment_method),
            self._max_retries,
            order_id,
        )

        logger.info(
            "Order %s placed: website=%s owner=%s lines=%d total=%s",
            order.id, order.website_id, order.owner_id, len(order.lines), order.total_amount,
        )
        if self._notifier is not None:
            self._notifier.order_placed(order, owner.email if owner else None)

        return OrderReceipt(
            order_id=order.id,
            order_number=order.order_number,
            total_amount=order.total_amount,
            payment_status=order.payment_status.value,
            status=order.status.value,
            lines=order.lines,
        )

    def _validate(self, request: CheckoutRequest) -> None:
        if not request.items:
            raise InvalidLineItem("Order must contain at least one item")
        for item in request.items:
            if isinstance(item.product_id, bool) or not isinstance(item.product_id, int) or item.product_id <= 0:
                raise InvalidLineItem(f"Invalid product id: {item.product_id!r}")
            if isinstance(item.quantity, bool) or not isinstance(item.quantity, int) or item.quantity <= 0:
                raise InvalidLineItem(
                    f"Quantity for product {item.product_id} must be a positive integer",
                    item.product_id,
                )
            if item.price is not None and to_money(item.price) < 0:
                raise InvalidLineItem(f"Price for product {item.product_id} cannot be negative", item.product_id)
        if not _clean(request.shipping_address):
            raise OrderValidationError("Shipping address is required")
        if request.total_amount is None or to_money(request.total_amount) < 0:
            raise OrderValidationError("Total amount must be zero or more")

    def _resolve_owner(self, request: CheckoutRequest, context: RequestContext) -> Optional[Identity]:
        # An authenticated session is authoritative; the body claim only counts without one
        if context.session_owner_id is not None:
            if request.user_id is not None and request.user_id != context.session_owner_id:
                logger.warning(
                    "Body user_id %s does not match session user %s",
                    request.user_id, context.session_owner_id,
                )
                raise IdentityUnresolvable(request.user_id, "does not match the session user")
            return self._identity_resolver.execute(context.session_owner_id, ClaimSource.SESSION)
        return self._identity_resolver.execute(request.user_id, ClaimSource.BODY)

    def _place(
        self,
        order_id: int,
        request: CheckoutRequest,
        context: RequestContext,
        owner: Optional[Identity],
        payment_method: PaymentMethod,
    ) -> Order:
        step = "begin"
        try:
            with self._uow_factory() as uow:
                step = "load_products"
                products = uow.products.find_by_ids(item.product_id for item in request.items)

                lines: List[OrderLine] = []
                for item in request.items:
                    product = products.get(item.product_id)
                    if product is None:
                        raise InvalidLineItem(f"Product {item.product_id} does not exist", item.product_id)
                    # Products without a website are shared by every tenant
                    if product.website_id is not None and product.website_id != context.website_id:
                        raise InvalidLineItem(
                            f"Product {product.id} is not sold on website {context.website_id}",
                            product.id,
                        )
                    if item.price is not None and not amounts_match(product.price, item.price, self._price_tolerance):
                        raise PriceMismatch(
                            f"Price of product {product.id} is {product.price}, not {to_money(item.price)}"
                        )
                    lines.append(OrderLine(
                        order_id=order_id,
                        product_id=product.id,
                        quantity=item.quantity,
                        price=product.price,
                    ))

                total = to_money(sum((line.subtotal for line in lines), Decimal("0")))
                if not amounts_match(total, request.total_amount, self._price_tolerance):
                    raise PriceMismatch(
                        f"Order total is {total}, not {to_money(request.total_amount)}"
                    )

                order = Order(
                    id=order_id,
                    website_id=context.website_id,
                    owner_id=owner.id if owner else None,
                    guest_name=None if owner else _clean(request.guest_name),
                    guest_email=None if owner else _clean(request.guest_email),
                    guest_phone=None if owner else _clean(request.guest_phone),
                    total_amount=total,
                    shipping_address=request.shipping_address.strip(),
                    payment_method=payment_method,
                    payment_status=initial_payment_status(payment_method),
                )

                step = "insert_order"
                uow.orders.insert(order)

                for line in lines:
                    step = f"insert_line:{line.product_id}"
                    uow.orders.insert_line(line)
                    step = f"decrement_stock:{line.product_id}"
                    if not uow.products.decrement_stock(line.product_id, line.quantity):
                        raise InsufficientStock(line.product_id, line.quantity)

                if owner is not None:
                    step = "clear_cart"
                    uow.carts.clear(owner.id)

                step = "commit"
                uow.commit()
        except OrderError:
            raise
        except Exception as e:
            logger.error(
                "Order %s rolled back at step '%s': %s | payload=%s",
                order_id, step, e, asdict(request), exc_info=True,
            )
            raise PersistenceFailure(step, order_id, e) from e

        order.lines = lines
        return order
