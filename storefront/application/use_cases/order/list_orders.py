"""
List Orders Use Case
====================

Order listings for the admin dashboard and the "My Orders" page,
labelled with customer and website names.
"""
from typing import List, Optional

from storefront.application.dto.order_dto import OrderSummaryResponse
from storefront.domain.models.identity import Identity
from storefront.domain.models.order import Order, OrderStatus
from storefront.domain.models.website import Website
from storefront.domain.repositories.identity_repository import IdentityRepository
from storefront.domain.repositories.order_repository import OrderRepository
from storefront.domain.repositories.website_repository import WebsiteRepository


def display_name(order: Order, owner: Optional[Identity]) -> str:
    if not order.is_guest() and owner is not None and owner.name:
        return owner.name
    if order.guest_name:
        return f"{order.guest_name} (Guest)"
    return "Guest"


def display_email(order: Order, owner: Optional[Identity]) -> Optional[str]:
    if not order.is_guest():
        return owner.email if owner else None
    return order.guest_email


class ListOrdersUseCase:
    """Use case for listing orders, newest first."""

    def __init__(
        self,
        order_repository: OrderRepository,
        identity_repository: IdentityRepository,
        website_repository: WebsiteRepository,
    ):
        self._orders = order_repository
        self._identities = identity_repository
        self._websites = website_repository

    def execute(
        self,
        website_id: Optional[int] = None,
        owner_id: Optional[int] = None,
        status: Optional[OrderStatus] = None,
    ) -> List[OrderSummaryResponse]:
        """
        Execute the list orders use case.

        Args:
            website_id: Only orders of this tenant
            owner_id: Only orders of this registered user
            status: Only orders in this fulfillment status

        Returns:
            Order summaries with display names resolved
        """
        orders = self._orders.list(website_id=website_id, owner_id=owner_id, status=status)
        owners = self._identities.find_by_ids(o.owner_id for o in orders if o.owner_id is not None)
        websites = self._websites.find_by_ids(o.website_id for o in orders)

        return [self._to_summary(o, owners.get(o.owner_id), websites.get(o.website_id)) for o in orders]

    def _to_summary(
        self,
        order: Order,
        owner: Optional[Identity],
        website: Optional[Website],
    ) -> OrderSummaryResponse:
        return OrderSummaryResponse(
            id=order.id,
            order_number=order.order_number,
            website_id=order.website_id,
            website_name=website.name if website else None,
            user_id=order.owner_id,
            guest_name=order.guest_name,
            guest_email=order.guest_email,
            guest_phone=order.guest_phone,
            display_name=display_name(order, owner),
            display_email=display_email(order, owner),
            total_amount=order.total_amount,
            shipping_address=order.shipping_address,
            payment_method=order.payment_method.value,
            payment_status=order.payment_status.value,
            status=order.status.value,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )
