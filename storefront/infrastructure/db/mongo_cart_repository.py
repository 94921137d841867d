"""
MongoDB Cart Repository
=======================

Concrete implementation of CartRepository using MongoDB.
"""
from typing import Optional

from pymongo.client_session import ClientSession

from storefront.core.config import get_settings
from storefront.domain.constants.catalog_fields import CartFields
from storefront.domain.repositories.cart_repository import CartRepository
from storefront.infrastructure.db.mongo_connection import MongoClientManager, get_mongo_client


class MongoCartRepository(CartRepository):

    def __init__(
        self,
        client: Optional[MongoClientManager] = None,
        session: Optional[ClientSession] = None,
    ):
        self._client = client or get_mongo_client()
        self._session = session
        self._collection = self._client.get_collection(get_settings().cart_collection)

    def clear(self, owner_id: int) -> int:
        result = self._collection.delete_many({CartFields.USER_ID: owner_id}, session=self._session)
        return result.deleted_count
