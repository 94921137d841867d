"""Checkout: owner resolution, validation, stock and atomicity."""
import threading
from decimal import Decimal

import pytest

from storefront.application.context import RequestContext
from storefront.application.use_cases.order.place_order import CheckoutItem, CheckoutRequest
from storefront.domain.exceptions import (
    ConcurrentUpdateError,
    IdentityUnresolvable,
    InsufficientStock,
    InvalidLineItem,
    MissingContact,
    OrderValidationError,
    PersistenceFailure,
    PriceMismatch,
    UnsupportedPaymentMethod,
)
from storefront.domain.models import Identity, OrderStatus, PaymentMethod, PaymentStatus

from tests.conftest import WEBSITE_ID


def checkout(items, total, **kwargs):
    kwargs.setdefault("shipping_address", "1 Main St, Springfield")
    return CheckoutRequest(
        items=[CheckoutItem(product_id=p, quantity=q, price=Decimal(price) if price else None) for p, q, price in items],
        total_amount=Decimal(total),
        **kwargs,
    )


def test_registered_checkout_owns_order_and_clears_cart(service, store, context, notifier):
    receipt = service.place_order(checkout([(5, 1, "50")], "50", user_id=7), context)

    order = store.orders[receipt.order_id]
    assert order.owner_id == 7
    assert order.guest_name is None
    assert order.guest_email is None
    assert order.guest_phone is None
    assert order.website_id == WEBSITE_ID
    assert order.payment_method is PaymentMethod.COD
    assert order.payment_status is PaymentStatus.PENDING
    assert order.status is OrderStatus.PENDING
    assert store.stock_of(5) == 9
    assert 7 not in store.carts
    assert receipt.order_number == f"ORD-{receipt.order_id}"
    assert notifier.events == [("order.placed", receipt.order_id, "alice@example.com")]


def test_session_user_owns_order_when_body_has_no_user_id(service, store):
    context = RequestContext(website_id=WEBSITE_ID, session_owner_id=7)
    receipt = service.place_order(checkout([(5, 1, "50.00")], "50.00"), context)

    assert store.orders[receipt.order_id].owner_id == 7


def test_registered_checkout_drops_guest_fields(service, store, context):
    request = checkout([(5, 1, "50")], "50", user_id=7, guest_name="Someone", guest_email="x@y.com")
    receipt = service.place_order(request, context)

    order = store.orders[receipt.order_id]
    assert order.owner_id == 7
    assert order.guest_name is None
    assert order.guest_email is None


def test_guest_paypal_checkout_is_paid(service, store, context):
    request = checkout([(6, 2, "10.00")], "20.00", guest_email="a@b.com", payment_method="PayPal")
    receipt = service.place_order(request, context)

    order = store.orders[receipt.order_id]
    assert order.owner_id is None
    assert order.guest_email == "a@b.com"
    assert order.payment_status is PaymentStatus.COMPLETED
    assert receipt.payment_status == "completed"


def test_unknown_user_is_downgraded_to_guest(service, store, context):
    request = checkout([(5, 1, "50")], "50", user_id=99999, guest_name="Bob", guest_email="bob@example.com")
    receipt = service.place_order(request, context)

    order = store.orders[receipt.order_id]
    assert order.owner_id is None
    assert order.guest_name == "Bob"
    assert order.guest_email == "bob@example.com"
    assert 7 in store.carts


def test_identity_store_outage_is_downgraded_to_guest(service, store, context):
    store.identity_store_down = True
    request = checkout([(5, 1, "50")], "50", user_id=7, guest_email="alice@example.com")
    receipt = service.place_order(request, context)

    assert store.orders[receipt.order_id].owner_id is None


def test_unknown_user_without_contact_is_rejected(service, store, context):
    with pytest.raises(MissingContact):
        service.place_order(checkout([(5, 1, "50")], "50", user_id=99999), context)

    assert store.orders == {}
    assert store.stock_of(5) == 10


def test_strict_identity_rejects_unverifiable_session(make_service, store):
    service = make_service(strict_identity=True)
    context = RequestContext(website_id=WEBSITE_ID, session_owner_id=99999)

    with pytest.raises(IdentityUnresolvable):
        service.place_order(checkout([(5, 1, "50")], "50", guest_email="a@b.com"), context)

    assert store.orders == {}


def test_strict_identity_still_allows_anonymous_guests(make_service, store, context):
    service = make_service(strict_identity=True)
    receipt = service.place_order(checkout([(5, 1, "50")], "50", guest_email="a@b.com"), context)

    assert store.orders[receipt.order_id].owner_id is None


def test_strict_identity_checks_session_even_when_body_repeats_it(make_service, store):
    service = make_service(strict_identity=True)
    context = RequestContext(website_id=WEBSITE_ID, session_owner_id=99999)
    request = checkout([(5, 1, "50")], "50", user_id=99999, guest_email="a@b.com")

    with pytest.raises(IdentityUnresolvable):
        service.place_order(request, context)

    assert store.orders == {}


def test_body_user_id_cannot_override_session_user(service, store):
    store.identities[8] = Identity(id=8, name="Carol Other", email="carol@example.com")
    store.carts[8] = [5]
    context = RequestContext(website_id=WEBSITE_ID, session_owner_id=7)

    with pytest.raises(IdentityUnresolvable):
        service.place_order(checkout([(5, 1, "50")], "50", user_id=8), context)

    assert store.orders == {}
    assert store.carts[8] == [5]
    assert store.carts[7] == [5, 6]
    assert store.stock_of(5) == 10


def test_body_user_id_matching_session_is_accepted(service, store):
    context = RequestContext(website_id=WEBSITE_ID, session_owner_id=7)

    receipt = service.place_order(checkout([(5, 1, "50")], "50", user_id=7), context)

    assert store.orders[receipt.order_id].owner_id == 7


def test_product_of_another_website_is_rejected(service, store, context):
    store.add_product(9, "15.00", stock=3, name="Foreign Mug", website_id=WEBSITE_ID + 1)

    with pytest.raises(InvalidLineItem) as exc_info:
        service.place_order(checkout([(5, 1, "50"), (9, 1, "15")], "65", guest_email="a@b.com"), context)

    assert exc_info.value.product_id == 9
    assert store.orders == {}
    assert store.stock_of(5) == 10
    assert store.stock_of(9) == 3


def test_product_of_the_same_website_is_accepted(service, store, context):
    store.add_product(9, "15.00", stock=3, name="Local Mug", website_id=WEBSITE_ID)

    receipt = service.place_order(checkout([(9, 1, "15")], "15", guest_email="a@b.com"), context)

    assert store.orders[receipt.order_id].website_id == WEBSITE_ID
    assert store.stock_of(9) == 2


def test_empty_items_are_rejected(service, store, context):
    with pytest.raises(InvalidLineItem):
        service.place_order(checkout([], "0", guest_email="a@b.com"), context)

    assert store.orders == {}


@pytest.mark.parametrize("quantity", [0, -1])
def test_non_positive_quantity_is_rejected(service, store, context, quantity):
    with pytest.raises(InvalidLineItem):
        service.place_order(checkout([(5, quantity, "50")], "50", guest_email="a@b.com"), context)

    assert store.stock_of(5) == 10


def test_bad_line_rejects_whole_order_before_any_write(service, store, context):
    request = checkout([(5, 1, "50"), (6, 1, "10"), (404, 1, "1")], "61", guest_email="a@b.com")

    with pytest.raises(InvalidLineItem) as exc_info:
        service.place_order(request, context)

    assert exc_info.value.product_id == 404
    assert store.orders == {}
    assert store.lines == {}
    assert store.stock_of(5) == 10
    assert store.stock_of(6) == 4


def test_missing_shipping_address_is_rejected(service, context):
    with pytest.raises(OrderValidationError):
        service.place_order(checkout([(5, 1, "50")], "50", guest_email="a@b.com", shipping_address="  "), context)


def test_unsupported_payment_method_is_rejected(service, context):
    with pytest.raises(UnsupportedPaymentMethod):
        service.place_order(checkout([(5, 1, "50")], "50", guest_email="a@b.com", payment_method="Bitcoin"), context)


def test_price_differing_from_catalog_is_rejected(service, store, context):
    with pytest.raises(PriceMismatch):
        service.place_order(checkout([(5, 1, "5.00")], "5.00", guest_email="a@b.com"), context)

    assert store.orders == {}
    assert store.stock_of(5) == 10


def test_total_differing_from_lines_is_rejected(service, store, context):
    with pytest.raises(PriceMismatch):
        service.place_order(checkout([(5, 2, "50")], "50", guest_email="a@b.com"), context)

    assert store.stock_of(5) == 10


def test_total_within_tolerance_is_accepted_and_recomputed(service, store, context):
    receipt = service.place_order(checkout([(5, 1, "50")], "49.99", guest_email="a@b.com"), context)

    assert receipt.total_amount == Decimal("50.00")
    assert store.orders[receipt.order_id].total_amount == Decimal("50.00")


def test_catalog_price_is_used_when_caller_sends_none(service, store, context):
    receipt = service.place_order(checkout([(6, 3, None)], "30", guest_email="a@b.com"), context)

    assert store.lines[receipt.order_id][0].price == Decimal("10.00")


def test_round_trip_through_get_order(service, store, context):
    store.add_product(1, "10.00", stock=5)
    receipt = service.place_order(checkout([(1, 2, "10.00")], "20.00", guest_email="a@b.com"), context)

    order = service.get_order(receipt.order_id)
    assert len(order.items) == 1
    assert order.items[0].product_id == 1
    assert order.items[0].quantity == 2
    assert order.items[0].price == Decimal("10.00")
    assert order.total_amount == Decimal("20.00")


def test_stock_decrements_match_ordered_quantities(service, store, context):
    request = checkout([(5, 2, "50"), (6, 1, "10"), (5, 1, "50")], "160", guest_email="a@b.com")
    receipt = service.place_order(request, context)

    lines = store.lines[receipt.order_id]
    assert sum(line.quantity for line in lines) == 4
    assert store.stock_of(5) == 10 - 3
    assert store.stock_of(6) == 4 - 1


def test_insufficient_stock_rejects_whole_order(service, store, context):
    request = checkout([(5, 1, "50"), (6, 5, "10")], "100", user_id=7)

    with pytest.raises(InsufficientStock) as exc_info:
        service.place_order(request, context)

    assert exc_info.value.product_id == 6
    assert store.orders == {}
    assert store.lines == {}
    assert store.stock_of(5) == 10
    assert store.stock_of(6) == 4
    assert store.carts[7] == [5, 6]


def test_storage_error_mid_order_rolls_everything_back(service, store, context, notifier):
    store.fail_decrement[6] = RuntimeError("disk on fire")
    request = checkout([(5, 1, "50"), (6, 1, "10")], "60", user_id=7)

    with pytest.raises(PersistenceFailure) as exc_info:
        service.place_order(request, context)

    failure = exc_info.value
    assert failure.step == "decrement_stock:6"
    assert failure.order_id is not None
    assert "disk on fire" not in str(failure)
    assert store.orders == {}
    assert store.lines == {}
    assert store.stock_of(5) == 10
    assert store.carts[7] == [5, 6]
    assert notifier.events == []


def test_order_ids_are_not_reused_after_rollback(service, store, context):
    store.fail_decrement[5] = RuntimeError("boom")
    with pytest.raises(PersistenceFailure) as exc_info:
        service.place_order(checkout([(5, 1, "50")], "50", guest_email="a@b.com"), context)
    del store.fail_decrement[5]

    receipt = service.place_order(checkout([(5, 1, "50")], "50", guest_email="a@b.com"), context)

    assert receipt.order_id > exc_info.value.order_id


def test_write_conflicts_are_retried(service, store, context):
    store.commit_conflicts = 2
    receipt = service.place_order(checkout([(5, 1, "50")], "50", guest_email="a@b.com"), context)

    assert receipt.order_id in store.orders
    assert store.stock_of(5) == 9


def test_write_conflicts_give_up_after_max_retries(make_service, store, context):
    service = make_service(max_retries=1)
    store.commit_conflicts = 5

    with pytest.raises(ConcurrentUpdateError):
        service.place_order(checkout([(5, 1, "50")], "50", guest_email="a@b.com"), context)

    assert store.orders == {}
    assert store.stock_of(5) == 10


def test_concurrent_checkouts_for_last_unit(service, store, context):
    store.add_product(9, "15.00", stock=1)
    barrier = threading.Barrier(2)
    outcomes = []

    def buy(email):
        barrier.wait()
        try:
            outcomes.append(service.place_order(checkout([(9, 1, "15")], "15", guest_email=email), context))
        except InsufficientStock as e:
            outcomes.append(e)

    threads = [threading.Thread(target=buy, args=(f"buyer{i}@example.com",)) for i in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(outcomes) == 2
    assert sum(isinstance(o, InsufficientStock) for o in outcomes) == 1
    assert len(store.orders) == 1
    assert store.stock_of(9) == 0
