from typing import TYPE_CHECKING

from ...domain.repositories.cart_repository import CartRepository
from ...domain.repositories.identity_repository import IdentityRepository
from ...domain.repositories.order_repository import OrderRepository
from ...domain.repositories.product_repository import ProductRepository
from ...domain.repositories.website_repository import WebsiteRepository
from ...infrastructure.db.mongo_cart_repository import MongoCartRepository
from ...infrastructure.db.mongo_identity_repository import MongoIdentityRepository
from ...infrastructure.db.mongo_order_repository import MongoOrderRepository
from ...infrastructure.db.mongo_product_repository import MongoProductRepository
from ...infrastructure.db.mongo_unit_of_work import MongoUnitOfWork
from ...infrastructure.db.mongo_website_repository import MongoWebsiteRepository

if TYPE_CHECKING:
    from ..base_container import BaseContainer

# Key of the callable that opens a new transactional unit of work
UOW_FACTORY = "uow_factory"


class RepositoryProvider:
    """Repository registration provider - wires domain interfaces to infrastructure implementations"""

    @staticmethod
    def register(container: "BaseContainer") -> None:
        """
        Register all repository implementations.
        Gets database client from database provider and creates repository instances.
        """
        mongo_client = container.get("mongo_client")

        # Domain interfaces -> Infrastructure implementations (outside any transaction)
        container.register_singleton(OrderRepository, MongoOrderRepository(mongo_client))
        container.register_singleton(ProductRepository, MongoProductRepository(mongo_client))
        container.register_singleton(CartRepository, MongoCartRepository(mongo_client))
        container.register_singleton(IdentityRepository, MongoIdentityRepository(mongo_client))
        container.register_singleton(WebsiteRepository, MongoWebsiteRepository(mongo_client))

        # Each call opens a fresh session-bound unit of work
        container.register_singleton(UOW_FACTORY, lambda: MongoUnitOfWork(mongo_client))
