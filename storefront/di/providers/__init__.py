"""
Providers Package
=================

Dependency injection providers for registering dependencies.
"""
from .database_provider import DatabaseProvider
from .repository_provider import RepositoryProvider, UOW_FACTORY
from .order_provider import OrderProvider

__all__ = [
    "DatabaseProvider",
    "RepositoryProvider",
    "OrderProvider",
    "UOW_FACTORY",
]
