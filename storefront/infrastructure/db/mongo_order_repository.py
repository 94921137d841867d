"""
MongoDB Order Repository
========================

Concrete implementation of OrderRepository using MongoDB.
Order headers live in the orders collection, lines in order_items.
"""
from decimal import Decimal
from typing import Any, List, Optional

from bson.decimal128 import Decimal128
from pymongo import DESCENDING, ReturnDocument
from pymongo.client_session import ClientSession

from storefront.core.config import get_settings
from storefront.domain.constants.catalog_fields import CounterFields
from storefront.domain.constants.order_fields import OrderFields, OrderLineFields
from storefront.domain.models.order import (
    Order,
    OrderLine,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
)
from storefront.domain.repositories.order_repository import OrderRepository
from storefront.infrastructure.db.mongo_connection import MongoClientManager, get_mongo_client
from storefront.utils.datetime_utils import ensure_aware, now
from storefront.utils.money import to_money


ORDER_SEQUENCE = "orders"


def to_decimal128(amount: Decimal) -> Decimal128:
    return Decimal128(str(to_money(amount)))


def from_mongo_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal128):
        return to_money(value.to_decimal())
    return to_money(value)


class MongoOrderRepository(OrderRepository):
    """
    MongoDB implementation of OrderRepository.

    When constructed with a session every operation joins that session's
    transaction; otherwise operations run on their own.
    """

    def __init__(
        self,
        client: Optional[MongoClientManager] = None,
        session: Optional[ClientSession] = None,
    ):
        settings = get_settings()
        self._client = client or get_mongo_client()
        self._session = session
        self._orders = self._client.get_collection(settings.orders_collection)
        self._items = self._client.get_collection(settings.order_items_collection)
        self._counters = self._client.get_collection(settings.counters_collection)

    def _to_entity(self, doc: dict) -> Order:
        """Convert MongoDB document to Order entity."""
        return Order(
            id=doc[OrderFields.ID],
            website_id=doc[OrderFields.WEBSITE_ID],
            owner_id=doc.get(OrderFields.USER_ID),
            guest_name=doc.get(OrderFields.GUEST_NAME),
            guest_email=doc.get(OrderFields.GUEST_EMAIL),
            guest_phone=doc.get(OrderFields.GUEST_PHONE),
            total_amount=from_mongo_decimal(doc[OrderFields.TOTAL_AMOUNT]),
            shipping_address=doc.get(OrderFields.SHIPPING_ADDRESS, ""),
            payment_method=PaymentMethod(doc.get(OrderFields.PAYMENT_METHOD, PaymentMethod.COD.value)),
            payment_status=PaymentStatus(doc.get(OrderFields.PAYMENT_STATUS, PaymentStatus.PENDING.value)),
            status=OrderStatus(doc.get(OrderFields.STATUS, OrderStatus.PENDING.value)),
            created_at=ensure_aware(doc.get(OrderFields.CREATED_AT)) or now(),
            updated_at=ensure_aware(doc.get(OrderFields.UPDATED_AT)) or now(),
        )

    def _to_document(self, order: Order) -> dict:
        """Convert Order entity to MongoDB document."""
        return {
            OrderFields.ID: order.id,
            OrderFields.WEBSITE_ID: order.website_id,
            OrderFields.USER_ID: order.owner_id,
            OrderFields.GUEST_NAME: order.guest_name,
            OrderFields.GUEST_EMAIL: order.guest_email,
            OrderFields.GUEST_PHONE: order.guest_phone,
            OrderFields.TOTAL_AMOUNT: to_decimal128(order.total_amount),
            OrderFields.SHIPPING_ADDRESS: order.shipping_address,
            OrderFields.PAYMENT_METHOD: order.payment_method.value,
            OrderFields.PAYMENT_STATUS: order.payment_status.value,
            OrderFields.STATUS: order.status.value,
            OrderFields.CREATED_AT: order.created_at,
            OrderFields.UPDATED_AT: order.updated_at,
        }

    def _line_to_entity(self, doc: dict) -> OrderLine:
        return OrderLine(
            order_id=doc[OrderLineFields.ORDER_ID],
            product_id=doc[OrderLineFields.PRODUCT_ID],
            quantity=doc[OrderLineFields.QUANTITY],
            price=from_mongo_decimal(doc[OrderLineFields.PRICE]),
        )

    def next_id(self) -> int:
        """Allocate the next order id from the counters collection."""
        # Not bound to the session: ids of rolled back orders are never reused
        doc = self._counters.find_one_and_update(
            {CounterFields.MONGO_ID: ORDER_SEQUENCE},
            {"$inc": {CounterFields.VALUE: 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return int(doc[CounterFields.VALUE])

    def insert(self, order: Order) -> Order:
        """Insert an order header."""
        self._orders.insert_one(self._to_document(order), session=self._session)
        return order

    def insert_line(self, line: OrderLine) -> OrderLine:
        """Insert one line item."""
        self._items.insert_one(
            {
                OrderLineFields.ORDER_ID: line.order_id,
                OrderLineFields.PRODUCT_ID: line.product_id,
                OrderLineFields.QUANTITY: line.quantity,
                OrderLineFields.PRICE: to_decimal128(line.price),
            },
            session=self._session,
        )
        return line

    def find_by_id(self, order_id: int) -> Optional[Order]:
        """Find an order by its ID, lines included."""
        doc = self._orders.find_one({OrderFields.ID: order_id}, session=self._session)
        if not doc:
            return None
        order = self._to_entity(doc)
        line_docs = self._items.find(
            {OrderLineFields.ORDER_ID: order_id}, session=self._session
        ).sort(OrderFields.MONGO_ID, 1)
        order.lines = [self._line_to_entity(d) for d in line_docs]
        return order

    def list(
        self,
        website_id: Optional[int] = None,
        owner_id: Optional[int] = None,
        status: Optional[OrderStatus] = None,
    ) -> List[Order]:
        """List orders newest first."""
        query: dict = {}
        if website_id is not None:
            query[OrderFields.WEBSITE_ID] = website_id
        if owner_id is not None:
            query[OrderFields.USER_ID] = owner_id
        if status is not None:
            query[OrderFields.STATUS] = status.value

        docs = self._orders.find(query, session=self._session).sort(
            [(OrderFields.CREATED_AT, DESCENDING), (OrderFields.ID, DESCENDING)]
        )
        return [self._to_entity(doc) for doc in docs]

    def update_status(self, order_id: int, status: OrderStatus) -> bool:
        result = self._orders.update_one(
            {OrderFields.ID: order_id},
            {"$set": {OrderFields.STATUS: status.value, OrderFields.UPDATED_AT: now()}},
            session=self._session,
        )
        return result.matched_count > 0

    def update_payment_status(self, order_id: int, payment_status: PaymentStatus) -> bool:
        result = self._orders.update_one(
            {OrderFields.ID: order_id},
            {"$set": {OrderFields.PAYMENT_STATUS: payment_status.value, OrderFields.UPDATED_AT: now()}},
            session=self._session,
        )
        return result.matched_count > 0
