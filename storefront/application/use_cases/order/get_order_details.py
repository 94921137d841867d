"""
Get Order Details Use Case
==========================

Loads one order with its line items, the products they refer to and the
customer the order belongs to.
"""
from typing import Optional

from storefront.application.dto.order_dto import OrderDetailResponse, OrderLineResponse
from storefront.domain.exceptions import OrderNotFound
from storefront.domain.models.identity import Identity
from storefront.domain.models.order import Order
from storefront.domain.repositories.identity_repository import IdentityRepository
from storefront.domain.repositories.order_repository import OrderRepository
from storefront.domain.repositories.product_repository import ProductRepository


class GetOrderDetailsUseCase:
    """Use case for reading a single order."""

    def __init__(
        self,
        order_repository: OrderRepository,
        identity_repository: IdentityRepository,
        product_repository: ProductRepository,
    ):
        self._orders = order_repository
        self._identities = identity_repository
        self._products = product_repository

    def execute(self, order_id: int) -> OrderDetailResponse:
        """
        Execute the get order details use case.

        Raises:
            OrderNotFound: No order with this id
        """
        order = self._orders.find_by_id(order_id)
        if order is None:
            raise OrderNotFound(order_id)
        owner = self._identities.find_by_id(order.owner_id) if order.owner_id is not None else None
        return self.to_response(order, owner)

    def to_response(self, order: Order, owner: Optional[Identity]) -> OrderDetailResponse:
        products = self._products.find_by_ids(line.product_id for line in order.lines)

        items = []
        for line in order.lines:
            product = products.get(line.product_id)
            items.append(OrderLineResponse(
                product_id=line.product_id,
                quantity=line.quantity,
                price=line.price,
                subtotal=line.subtotal,
                product_name=product.name if product else None,
                image_url=product.image_url if product else None,
            ))

        return OrderDetailResponse(
            id=order.id,
            order_number=order.order_number,
            website_id=order.website_id,
            user_id=order.owner_id,
            guest_name=order.guest_name,
            guest_email=order.guest_email,
            guest_phone=order.guest_phone,
            customer_name=owner.name if owner else order.guest_name,
            customer_email=owner.email if owner else order.guest_email,
            total_amount=order.total_amount,
            shipping_address=order.shipping_address,
            payment_method=order.payment_method.value,
            payment_status=order.payment_status.value,
            status=order.status.value,
            created_at=order.created_at,
            updated_at=order.updated_at,
            items=items,
        )
