"""MongoDB adapters: query shapes and transaction lifecycle, against mocks."""
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from bson.decimal128 import Decimal128
from pymongo.errors import OperationFailure

from storefront.application.context import RequestContext
from storefront.application.use_cases.order.place_order import CheckoutItem, CheckoutRequest, PlaceOrderUseCase
from storefront.application.use_cases.order.resolve_identity import ResolveIdentityUseCase
from storefront.domain.exceptions import ConcurrentUpdateError, InsufficientStock
from storefront.domain.models import Order, OrderLine, OrderStatus
from storefront.infrastructure.db.mongo_order_repository import MongoOrderRepository, from_mongo_decimal
from storefront.infrastructure.db.mongo_product_repository import MongoProductRepository
from storefront.infrastructure.db.mongo_unit_of_work import MongoUnitOfWork


@pytest.fixture
def collections():
    return {}


@pytest.fixture
def client(collections):
    manager = MagicMock()
    manager.get_collection.side_effect = lambda name: collections.setdefault(name, MagicMock(name=name))
    return manager


def labelled_error(label):
    return OperationFailure("conflict", details={"errorLabels": [label]})


def test_decrement_stock_is_conditional(client, collections):
    session = MagicMock()
    repo = MongoProductRepository(client, session)
    collections["products"].find_one_and_update.return_value = {"id": 5, "stock": 0}

    assert repo.decrement_stock(5, 1) is True

    args, kwargs = collections["products"].find_one_and_update.call_args
    assert args[0] == {"id": 5, "stock": {"$gte": 1}}
    assert args[1] == {"$inc": {"stock": -1}}
    assert kwargs["session"] is session


def test_decrement_stock_reports_shortage(client, collections):
    collections.setdefault("products", MagicMock()).find_one_and_update.return_value = None

    assert MongoProductRepository(client).decrement_stock(5, 3) is False


def test_order_ids_come_from_counter_outside_session(client, collections):
    session = MagicMock()
    collections.setdefault("counters", MagicMock()).find_one_and_update.return_value = {"_id": "orders", "value": 42}

    assert MongoOrderRepository(client, session).next_id() == 42

    kwargs = collections["counters"].find_one_and_update.call_args.kwargs
    assert kwargs["upsert"] is True
    assert "session" not in kwargs


def test_insert_stores_amounts_as_decimal128(client, collections):
    session = MagicMock()
    repo = MongoOrderRepository(client, session)
    order = Order(id=1, website_id=3, total_amount=Decimal("20"), shipping_address="x", owner_id=7)

    repo.insert(order)
    repo.insert_line(OrderLine(order_id=1, product_id=5, quantity=2, price=Decimal("10")))

    doc = collections["orders"].insert_one.call_args.args[0]
    assert doc["total_amount"] == Decimal128("20.00")
    assert doc["user_id"] == 7
    assert doc["status"] == "pending"
    line = collections["order_items"].insert_one.call_args.args[0]
    assert line == {"order_id": 1, "product_id": 5, "quantity": 2, "price": Decimal128("10.00")}
    assert collections["order_items"].insert_one.call_args.kwargs["session"] is session


def test_update_status_reports_missing_order(client, collections):
    collections.setdefault("orders", MagicMock()).update_one.return_value.matched_count = 0

    assert MongoOrderRepository(client).update_status(1, OrderStatus.SHIPPED) is False


def test_from_mongo_decimal():
    assert from_mongo_decimal(Decimal128("19.999")) == Decimal("20.00")
    assert from_mongo_decimal(5) == Decimal("5.00")


def test_unit_of_work_commits(client):
    session = client.start_session.return_value
    session.in_transaction = False

    with MongoUnitOfWork(client) as uow:
        uow.commit()

    session.start_transaction.assert_called_once()
    session.commit_transaction.assert_called_once()
    session.abort_transaction.assert_not_called()
    session.end_session.assert_called_once()


def test_unit_of_work_aborts_on_error(client):
    session = client.start_session.return_value
    session.in_transaction = True

    with pytest.raises(RuntimeError):
        with MongoUnitOfWork(client):
            raise RuntimeError("boom")

    session.abort_transaction.assert_called_once()
    session.end_session.assert_called_once()


def test_unit_of_work_maps_transient_errors(client):
    session = client.start_session.return_value
    session.in_transaction = True

    with pytest.raises(ConcurrentUpdateError):
        with MongoUnitOfWork(client):
            raise labelled_error("TransientTransactionError")


def test_unit_of_work_retries_unknown_commit_result(client):
    session = client.start_session.return_value
    session.in_transaction = False
    session.commit_transaction.side_effect = [labelled_error("UnknownTransactionCommitResult"), None]

    with MongoUnitOfWork(client) as uow:
        uow.commit()

    assert session.commit_transaction.call_count == 2


def test_unit_of_work_abort_failure_keeps_original_error(client):
    session = client.start_session.return_value
    session.in_transaction = True
    session.abort_transaction.side_effect = OperationFailure("abort failed")

    with pytest.raises(RuntimeError, match="boom"):
        with MongoUnitOfWork(client):
            raise RuntimeError("boom")

    session.end_session.assert_called_once()


def test_unit_of_work_abort_failure_keeps_transient_mapping(client):
    session = client.start_session.return_value
    session.in_transaction = True
    session.abort_transaction.side_effect = OperationFailure("abort failed")

    with pytest.raises(ConcurrentUpdateError):
        with MongoUnitOfWork(client):
            raise labelled_error("TransientTransactionError")


def test_checkout_retries_transient_conflict_then_reports_shortage(client, collections):
    session = client.start_session.return_value
    session.in_transaction = True
    products = collections.setdefault("products", MagicMock())
    products.find.return_value = [{"id": 9, "name": "Lamp", "price": Decimal128("15.00"), "stock": 1}]
    # First attempt loses a write conflict; by the retry the last unit is gone
    products.find_one_and_update.side_effect = [labelled_error("TransientTransactionError"), None]
    collections.setdefault("counters", MagicMock()).find_one_and_update.return_value = {"value": 1}

    use_case = PlaceOrderUseCase(
        MongoOrderRepository(client),
        ResolveIdentityUseCase(MagicMock()),
        lambda: MongoUnitOfWork(client),
        max_retries=3,
    )
    request = CheckoutRequest(
        items=[CheckoutItem(product_id=9, quantity=1, price=Decimal("15.00"))],
        total_amount=Decimal("15.00"),
        shipping_address="1 Main St",
        guest_email="guest@example.com",
    )

    with pytest.raises(InsufficientStock) as exc_info:
        use_case.execute(request, RequestContext(website_id=3))

    assert exc_info.value.product_id == 9
    assert products.find_one_and_update.call_count == 2
    assert collections["orders"].insert_one.call_count == 2
    session.commit_transaction.assert_not_called()
    assert session.abort_transaction.call_count == 2
    assert session.end_session.call_count == 2
