from typing import TYPE_CHECKING

from ...infrastructure.db.mongo_connection import get_mongo_client

if TYPE_CHECKING:
    from ..base_container import BaseContainer


class DatabaseProvider:
    """Centralized database connection provider - single source of truth for all DB connections"""

    @staticmethod
    def register(container: "BaseContainer") -> None:
        """
        Register all database connections in the container.
        Repositories and units of work are built from the client registered here.
        """
        container.register_singleton("mongo_client", get_mongo_client())
