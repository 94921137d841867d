"""
MongoDB Client
==============

Singleton MongoDB client for database connections.
"""
import logging
from typing import Optional

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.client_session import ClientSession
from pymongo.collection import Collection
from pymongo.database import Database

from storefront.core.config import get_settings

logger = logging.getLogger(__name__)


class MongoClientManager:
    """
    Singleton MongoDB client manager.

    Manages MongoDB connections and provides access to collections and
    client sessions (needed for multi-document transactions).
    """
    _instance: Optional["MongoClientManager"] = None
    _client: Optional[MongoClient] = None
    _database: Optional[Database] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if self._client is None:
            self._initialize_client()

    def _initialize_client(self) -> None:
        """Initialize MongoDB client connection."""
        if self._client is not None:
            return  # Already initialized

        settings = get_settings()
        if not settings.mongo_uri:
            raise RuntimeError("MONGO_URI not set. Please configure it in your .env file.")

        self._client = MongoClient(settings.mongo_uri, tz_aware=True)
        self._database = self._client[settings.mongo_database_name]
        logger.info("[mongo] Connected to MongoDB: %s", settings.mongo_database_name)

    def get_database(self) -> Database:
        """Get MongoDB database instance."""
        if self._database is None:
            self._initialize_client()
        return self._database

    def get_collection(self, collection_name: str) -> Collection:
        """
        Get a MongoDB collection.

        Args:
            collection_name: Name of the collection

        Returns:
            MongoDB Collection object
        """
        database = self.get_database()
        return database[collection_name]

    def start_session(self) -> ClientSession:
        """Start a client session; the caller owns it and must end it."""
        if self._client is None:
            self._initialize_client()
        return self._client.start_session()

    def ensure_indexes(self) -> None:
        """Create the indexes order placement and queries rely on (idempotent)."""
        settings = get_settings()
        self.get_collection(settings.orders_collection).create_index([("id", ASCENDING)], unique=True)
        self.get_collection(settings.orders_collection).create_index(
            [("website_id", ASCENDING), ("created_at", DESCENDING)]
        )
        self.get_collection(settings.orders_collection).create_index(
            [("user_id", ASCENDING), ("created_at", DESCENDING)]
        )
        self.get_collection(settings.order_items_collection).create_index([("order_id", ASCENDING)])
        self.get_collection(settings.products_collection).create_index([("id", ASCENDING)], unique=True)
        self.get_collection(settings.users_collection).create_index([("id", ASCENDING)], unique=True)
        self.get_collection(settings.cart_collection).create_index([("user_id", ASCENDING)])
        logger.info("[mongo] Indexes ensured")

    def close(self) -> None:
        """Close MongoDB connection."""
        if self._client:
            self._client.close()
            self._client = None
            self._database = None


def get_mongo_client() -> MongoClientManager:
    """Get singleton MongoDB client manager."""
    return MongoClientManager()
