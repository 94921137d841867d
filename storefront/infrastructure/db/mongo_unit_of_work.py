"""
MongoDB Unit of Work
====================

Runs the repositories of one business operation inside a single
multi-document transaction (requires a replica set).
"""
import logging
from typing import Optional

from pymongo.client_session import ClientSession
from pymongo.errors import PyMongoError
from pymongo.read_concern import ReadConcern
from pymongo.write_concern import WriteConcern

from storefront.domain.exceptions import ConcurrentUpdateError
from storefront.domain.repositories.unit_of_work import UnitOfWork
from storefront.infrastructure.db.mongo_cart_repository import MongoCartRepository
from storefront.infrastructure.db.mongo_connection import MongoClientManager, get_mongo_client
from storefront.infrastructure.db.mongo_order_repository import MongoOrderRepository
from storefront.infrastructure.db.mongo_product_repository import MongoProductRepository

logger = logging.getLogger(__name__)

TRANSIENT_TRANSACTION_ERROR = "TransientTransactionError"
UNKNOWN_COMMIT_RESULT = "UnknownTransactionCommitResult"
MAX_COMMIT_ATTEMPTS = 3


class MongoUnitOfWork(UnitOfWork):
    """
    MongoDB implementation of UnitOfWork.

    A new session and transaction is started on __enter__; repositories
    exposed on the instance are bound to it.
    """

    def __init__(self, client: Optional[MongoClientManager] = None):
        self._client = client or get_mongo_client()
        self._session: Optional[ClientSession] = None

    def __enter__(self) -> "MongoUnitOfWork":
        self._session = self._client.start_session()
        self._session.start_transaction(
            read_concern=ReadConcern("snapshot"),
            write_concern=WriteConcern("majority"),
        )
        self.orders = MongoOrderRepository(self._client, self._session)
        self.products = MongoProductRepository(self._client, self._session)
        self.carts = MongoCartRepository(self._client, self._session)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            self.rollback()
        except PyMongoError as abort_error:
            # The error that ended the unit of work, if any, still propagates
            logger.warning("[uow] Abort failed: %s", abort_error)
        finally:
            self._session.end_session()
            self._session = None

        if isinstance(exc, PyMongoError) and exc.has_error_label(TRANSIENT_TRANSACTION_ERROR):
            raise ConcurrentUpdateError(str(exc)) from exc

    def commit(self) -> None:
        """Commit, retrying when the outcome of the commit is unknown."""
        for attempt in range(1, MAX_COMMIT_ATTEMPTS + 1):
            try:
                self._session.commit_transaction()
                return
            except PyMongoError as e:
                if e.has_error_label(UNKNOWN_COMMIT_RESULT) and attempt < MAX_COMMIT_ATTEMPTS:
                    logger.warning("[uow] Commit result unknown, retrying (attempt %d)", attempt)
                    continue
                if e.has_error_label(TRANSIENT_TRANSACTION_ERROR):
                    raise ConcurrentUpdateError(str(e)) from e
                raise

    def rollback(self) -> None:
        if self._session is not None and self._session.in_transaction:
            self._session.abort_transaction()
