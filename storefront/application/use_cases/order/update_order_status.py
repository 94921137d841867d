"""
Update Order Status Use Case
============================

Administrative fulfillment status changes, validated against the
order status transition table. Cancelling an order puts its units
back into stock.
"""
import logging
from typing import Optional, Tuple, Union

from storefront.application.use_cases.order.retry import retry_on_conflict
from storefront.domain.exceptions import InvalidStatusTransition, OrderError, OrderNotFound, PersistenceFailure
from storefront.domain.models.order import Order, OrderStatus
from storefront.domain.repositories.unit_of_work import UnitOfWorkFactory
from storefront.utils.event_notifier import OrderEventNotifier

logger = logging.getLogger(__name__)


def parse_status(value: Union[str, OrderStatus]) -> OrderStatus:
    if isinstance(value, OrderStatus):
        return value
    try:
        return OrderStatus((value or "").strip().lower())
    except ValueError:
        accepted = ", ".join(s.value for s in OrderStatus)
        raise InvalidStatusTransition(f"Unknown order status '{value}' (accepted: {accepted})")


class UpdateOrderStatusUseCase:
    """Use case for moving an order through its fulfillment states."""

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        notifier: Optional[OrderEventNotifier] = None,
        max_retries: int = 3,
    ):
        self._uow_factory = uow_factory
        self._notifier = notifier
        self._max_retries = max_retries

    def execute(self, order_id: int, new_status: Union[str, OrderStatus]) -> Order:
        """
        Execute the update order status use case.

        Args:
            order_id: Order identifier
            new_status: Target fulfillment status

        Returns:
            The updated order

        Raises:
            OrderNotFound: No such order
            InvalidStatusTransition: Unknown status or illegal transition
            ConcurrentUpdateError: Still conflicting after all retries
            PersistenceFailure: Storage error, status and stock left unchanged
        """
        target = parse_status(new_status)

        order, previous = retry_on_conflict(
            lambda: self._apply(order_id, target),
            self._max_retries,
            order_id,
        )

        logger.info("Order %s status changed: %s -> %s", order.id, previous.value, order.status.value)
        if self._notifier is not None:
            self._notifier.order_status_changed(order, previous)
        return order

    def _apply(self, order_id: int, target: OrderStatus) -> Tuple[Order, OrderStatus]:
        step = "begin"
        try:
            with self._uow_factory() as uow:
                step = "load_order"
                order = uow.orders.find_by_id(order_id)
                if order is None:
                    raise OrderNotFound(order_id)

                previous = order.transition_to(target)
                step = "update_status"
                uow.orders.update_status(order.id, order.status)

                if order.status is OrderStatus.CANCELLED:
                    for line in order.lines:
                        step = f"restock:{line.product_id}"
                        uow.products.increment_stock(line.product_id, line.quantity)

                step = "commit"
                uow.commit()
        except OrderError:
            raise
        except Exception as e:
            logger.error("Status change of order %s rolled back at step '%s': %s", order_id, step, e, exc_info=True)
            raise PersistenceFailure(step, order_id, e, action="updated") from e
        return order, previous


class ConfirmPaymentUseCase:
    """Use case for recording that the payment of an order has been received."""

    def __init__(self, uow_factory: UnitOfWorkFactory, max_retries: int = 3):
        self._uow_factory = uow_factory
        self._max_retries = max_retries

    def execute(self, order_id: int) -> Order:
        order = retry_on_conflict(lambda: self._apply(order_id), self._max_retries, order_id)

        logger.info("Payment confirmed for order %s (%s)", order.id, order.payment_method.value)
        return order

    def _apply(self, order_id: int) -> Order:
        step = "begin"
        try:
            with self._uow_factory() as uow:
                step = "load_order"
                order = uow.orders.find_by_id(order_id)
                if order is None:
                    raise OrderNotFound(order_id)

                order.confirm_payment()
                step = "update_payment_status"
                uow.orders.update_payment_status(order.id, order.payment_status)
                step = "commit"
                uow.commit()
        except OrderError:
            raise
        except Exception as e:
            logger.error("Payment confirmation of order %s rolled back at step '%s': %s", order_id, step, e, exc_info=True)
            raise PersistenceFailure(step, order_id, e, action="updated") from e
        return order
