"""
Track Order Use Case
====================

Public order tracking: the order number plus a matching e-mail address
stand in for a logged-in session.
"""
import logging
import re
from typing import Union

from storefront.application.dto.order_dto import OrderDetailResponse
from storefront.application.use_cases.order.get_order_details import GetOrderDetailsUseCase
from storefront.domain.exceptions import OrderNotFound
from storefront.domain.repositories.identity_repository import IdentityRepository
from storefront.domain.repositories.order_repository import OrderRepository

logger = logging.getLogger(__name__)

_DIGITS = re.compile(r"\d+")


def parse_order_ref(order_ref: Union[int, str]) -> int:
    """Accept 42, "42" or "ORD-42"; the first run of digits is the order id."""
    if isinstance(order_ref, int) and not isinstance(order_ref, bool):
        return order_ref
    match = _DIGITS.search(str(order_ref))
    if not match:
        raise OrderNotFound(order_ref)
    return int(match.group(0))


def _same_email(a, b) -> bool:
    return bool(a) and bool(b) and a.strip().lower() == b.strip().lower()


class TrackOrderUseCase:
    """
    Use case for the public tracking page.

    A wrong e-mail is reported exactly like a missing order, so the
    endpoint cannot be used to probe which order numbers exist.
    """

    def __init__(
        self,
        order_repository: OrderRepository,
        identity_repository: IdentityRepository,
        details: GetOrderDetailsUseCase,
    ):
        self._orders = order_repository
        self._identities = identity_repository
        self._details = details

    def execute(self, order_ref: Union[int, str], email: str) -> OrderDetailResponse:
        order_id = parse_order_ref(order_ref)
        order = self._orders.find_by_id(order_id)
        if order is None:
            raise OrderNotFound(order_ref)

        owner = self._identities.find_by_id(order.owner_id) if order.owner_id is not None else None
        if not (_same_email(email, order.guest_email) or (owner and _same_email(email, owner.email))):
            logger.info("Tracking request for order %s with non-matching e-mail", order_id)
            raise OrderNotFound(order_ref)

        return self._details.to_response(order, owner)
