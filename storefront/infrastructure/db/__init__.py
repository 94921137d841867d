"""
Database Infrastructure
=======================

MongoDB-backed repositories and unit of work.
"""
from storefront.infrastructure.db.mongo_connection import MongoClientManager, get_mongo_client
from storefront.infrastructure.db.mongo_unit_of_work import MongoUnitOfWork

__all__ = [
    "MongoClientManager",
    "get_mongo_client",
    "MongoUnitOfWork",
]
