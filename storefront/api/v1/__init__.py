"""
API v1 Package
===============

Version 1 API controllers.
"""
from .order_controller import router as order_router

__all__ = ["order_router"]
