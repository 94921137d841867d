import pytest

from storefront.application.context import RequestContext
from storefront.application.services.order_service import OrderService
from storefront.domain.models import Identity, Website

from tests.fakes import (
    InMemoryIdentityRepository,
    InMemoryOrderRepository,
    InMemoryProductRepository,
    InMemoryStore,
    InMemoryUnitOfWork,
    InMemoryWebsiteRepository,
    RecordingNotifier,
)

WEBSITE_ID = 3


@pytest.fixture
def store():
    s = InMemoryStore()
    s.websites[WEBSITE_ID] = Website(id=WEBSITE_ID, name="Demo Shop")
    s.identities[7] = Identity(id=7, name="Alice Example", email="alice@example.com")
    s.add_product(5, "50.00", stock=10, name="Mug")
    s.add_product(6, "10.00", stock=4, name="Sticker")
    s.carts[7] = [5, 6]
    return s


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def make_service(store, notifier):
    def _make(strict_identity=False, max_retries=3):
        return OrderService(
            order_repository=InMemoryOrderRepository(store),
            product_repository=InMemoryProductRepository(store),
            identity_repository=InMemoryIdentityRepository(store),
            website_repository=InMemoryWebsiteRepository(store),
            uow_factory=lambda: InMemoryUnitOfWork(store),
            notifier=notifier,
            strict_identity=strict_identity,
            max_retries=max_retries,
        )
    return _make


@pytest.fixture
def service(make_service):
    return make_service()


@pytest.fixture
def context():
    return RequestContext(website_id=WEBSITE_ID)
