from .order_repository import OrderRepository
from .product_repository import ProductRepository
from .identity_repository import IdentityRepository
from .cart_repository import CartRepository
from .website_repository import WebsiteRepository
from .unit_of_work import UnitOfWork, UnitOfWorkFactory

__all__ = [
    "OrderRepository",
    "ProductRepository",
    "IdentityRepository",
    "CartRepository",
    "WebsiteRepository",
    "UnitOfWork",
    "UnitOfWorkFactory",
]
