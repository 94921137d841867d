"""
MongoDB Website Repository
==========================

Read-only access to the websites (tenants) collection.
"""
from typing import Dict, Iterable, Optional

from storefront.core.config import get_settings
from storefront.domain.constants.catalog_fields import WebsiteFields
from storefront.domain.models.website import Website
from storefront.domain.repositories.website_repository import WebsiteRepository
from storefront.infrastructure.db.mongo_connection import MongoClientManager, get_mongo_client


class MongoWebsiteRepository(WebsiteRepository):

    def __init__(self, client: Optional[MongoClientManager] = None):
        self._client = client or get_mongo_client()
        self._collection = self._client.get_collection(get_settings().websites_collection)

    def _to_entity(self, doc: dict) -> Website:
        return Website(id=doc[WebsiteFields.ID], name=doc.get(WebsiteFields.NAME, ""))

    def find_by_id(self, website_id: int) -> Optional[Website]:
        doc = self._collection.find_one({WebsiteFields.ID: website_id})
        if not doc:
            return None
        return self._to_entity(doc)

    def find_by_ids(self, website_ids: Iterable[int]) -> Dict[int, Website]:
        ids = list(set(website_ids))
        if not ids:
            return {}
        docs = self._collection.find({WebsiteFields.ID: {"$in": ids}})
        return {doc[WebsiteFields.ID]: self._to_entity(doc) for doc in docs}
