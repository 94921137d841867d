from typing import TYPE_CHECKING

from ...application.services.order_service import OrderService
from ...core.config import get_settings
from ...domain.repositories.identity_repository import IdentityRepository
from ...domain.repositories.order_repository import OrderRepository
from ...domain.repositories.product_repository import ProductRepository
from ...domain.repositories.website_repository import WebsiteRepository
from ...utils.event_notifier import OrderEventNotifier
from .repository_provider import UOW_FACTORY

if TYPE_CHECKING:
    from ..base_container import BaseContainer


class OrderProvider:
    """Order service provider - registers checkout and order management services"""

    @staticmethod
    def register(container: "BaseContainer") -> None:
        """
        Register the order event notifier and the order service.
        Checkout policies come from settings.
        """
        settings = get_settings()

        notifier = OrderEventNotifier(settings)
        container.register_singleton(OrderEventNotifier, notifier)

        container.register_singleton(
            OrderService,
            OrderService(
                order_repository=container.get(OrderRepository),
                product_repository=container.get(ProductRepository),
                identity_repository=container.get(IdentityRepository),
                website_repository=container.get(WebsiteRepository),
                uow_factory=container.get(UOW_FACTORY),
                notifier=notifier,
                strict_identity=settings.strict_identity,
                price_tolerance=settings.price_tolerance,
                max_retries=settings.transaction_max_retries,
            )
        )
