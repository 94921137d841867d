"""
MongoDB Product Repository
==========================

Concrete implementation of ProductRepository using MongoDB.
"""
from typing import Dict, Iterable, Optional

from pymongo import ReturnDocument
from pymongo.client_session import ClientSession

from storefront.core.config import get_settings
from storefront.domain.constants.catalog_fields import ProductFields
from storefront.domain.models.product import Product
from storefront.domain.repositories.product_repository import ProductRepository
from storefront.infrastructure.db.mongo_connection import MongoClientManager, get_mongo_client
from storefront.infrastructure.db.mongo_order_repository import from_mongo_decimal


class MongoProductRepository(ProductRepository):
    """
    MongoDB implementation of ProductRepository.

    Stock changes are single conditional updates, so concurrent orders
    can never drive stock below zero.
    """

    def __init__(
        self,
        client: Optional[MongoClientManager] = None,
        session: Optional[ClientSession] = None,
    ):
        self._client = client or get_mongo_client()
        self._session = session
        self._collection = self._client.get_collection(get_settings().products_collection)

    def _to_entity(self, doc: dict) -> Product:
        """Convert MongoDB document to Product entity."""
        return Product(
            id=doc[ProductFields.ID],
            name=doc.get(ProductFields.NAME, ""),
            price=from_mongo_decimal(doc.get(ProductFields.PRICE, 0)),
            stock=int(doc.get(ProductFields.STOCK, 0)),
            image_url=doc.get(ProductFields.IMAGE_URL),
            website_id=doc.get(ProductFields.WEBSITE_ID),
        )

    def find_by_id(self, product_id: int) -> Optional[Product]:
        doc = self._collection.find_one({ProductFields.ID: product_id}, session=self._session)
        if not doc:
            return None
        return self._to_entity(doc)

    def find_by_ids(self, product_ids: Iterable[int]) -> Dict[int, Product]:
        ids = list(set(product_ids))
        if not ids:
            return {}
        docs = self._collection.find({ProductFields.ID: {"$in": ids}}, session=self._session)
        products = (self._to_entity(doc) for doc in docs)
        return {product.id: product for product in products}

    def decrement_stock(self, product_id: int, quantity: int) -> bool:
        """Compare-and-decrement: only matches while enough stock is left."""
        result = self._collection.find_one_and_update(
            {ProductFields.ID: product_id, ProductFields.STOCK: {"$gte": quantity}},
            {"$inc": {ProductFields.STOCK: -quantity}},
            return_document=ReturnDocument.AFTER,
            session=self._session,
        )
        return result is not None

    def increment_stock(self, product_id: int, quantity: int) -> bool:
        result = self._collection.update_one(
            {ProductFields.ID: product_id},
            {"$inc": {ProductFields.STOCK: quantity}},
            session=self._session,
        )
        return result.matched_count > 0
