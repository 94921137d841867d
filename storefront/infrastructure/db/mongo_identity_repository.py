"""
MongoDB Identity Repository
===========================

Read-only access to the users collection.
"""
from typing import Dict, Iterable, Optional

from storefront.core.config import get_settings
from storefront.domain.constants.catalog_fields import UserFields
from storefront.domain.models.identity import Identity
from storefront.domain.repositories.identity_repository import IdentityRepository
from storefront.infrastructure.db.mongo_connection import MongoClientManager, get_mongo_client

# Never load credentials into the order service
_PROJECTION = {UserFields.ID: 1, UserFields.NAME: 1, UserFields.EMAIL: 1}


class MongoIdentityRepository(IdentityRepository):
    """MongoDB implementation of IdentityRepository."""

    def __init__(self, client: Optional[MongoClientManager] = None):
        self._client = client or get_mongo_client()
        self._collection = self._client.get_collection(get_settings().users_collection)

    def _to_entity(self, doc: dict) -> Identity:
        return Identity(
            id=doc[UserFields.ID],
            name=doc.get(UserFields.NAME),
            email=doc.get(UserFields.EMAIL),
        )

    def find_by_id(self, identity_id: int) -> Optional[Identity]:
        doc = self._collection.find_one({UserFields.ID: identity_id}, _PROJECTION)
        if not doc:
            return None
        return self._to_entity(doc)

    def find_by_ids(self, identity_ids: Iterable[int]) -> Dict[int, Identity]:
        ids = list(set(identity_ids))
        if not ids:
            return {}
        docs = self._collection.find({UserFields.ID: {"$in": ids}}, _PROJECTION)
        return {doc[UserFields.ID]: self._to_entity(doc) for doc in docs}
