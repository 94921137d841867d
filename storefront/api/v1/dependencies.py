"""
Dependency Container
====================

FastAPI dependencies: the order service from the DI container and the
per-request context (tenant and authenticated session user).
"""
from typing import Optional

from fastapi import Header, HTTPException, status

from storefront.application.context import RequestContext
from storefront.application.services.order_service import OrderService
from storefront.core.config import get_settings
from storefront.di.container import get_container


def get_order_service() -> OrderService:
    """
    Get order service instance (singleton).

    Returns:
        OrderService instance
    """
    container = get_container()
    return container.get(OrderService)


def get_request_context(
    x_website_id: Optional[int] = Header(None, description="Tenant the request is served for"),
    x_user_id: Optional[int] = Header(None, description="Authenticated session user (set by the gateway)"),
) -> RequestContext:
    """
    Build the request context.

    The tenant comes from the X-Website-Id header, else from WEBSITE_ID.
    There is no built-in default tenant.
    """
    website_id = x_website_id if x_website_id is not None else get_settings().website_id
    if website_id is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No website configured: send X-Website-Id or set WEBSITE_ID",
        )
    return RequestContext(website_id=website_id, session_owner_id=x_user_id)


def get_session_owner_id(
    x_user_id: Optional[int] = Header(None, description="Authenticated session user (set by the gateway)"),
) -> int:
    """Require an authenticated session user."""
    if x_user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Login required",
        )
    return x_user_id
