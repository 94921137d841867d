"""
FastAPI Application
===================

Main FastAPI app setup with all routes and middleware.
Serves checkout, order tracking and order administration.
"""
import logging
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storefront.api.v1 import order_router
from storefront.core.config import get_settings

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    """Set up root logging from LOG_LEVEL."""
    logging.basicConfig(
        level=get_settings().log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_application() -> FastAPI:
    """
    Create and configure FastAPI application.

    This function sets up the FastAPI application with:
    - Environment variable loading
    - CORS middleware configuration
    - API route registration
    - Startup/shutdown event handlers for the database and order events

    Returns:
        Configured FastAPI application instance
    """
    # Load environment variables from .env file
    env_path = Path(__file__).resolve().parent.parent / ".env"
    load_dotenv(env_path)
    configure_logging()

    application = FastAPI(
        title="Storefront Order API",
        description="Checkout, order tracking and order administration for storefront websites",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(order_router, prefix="/api/v1/orders")

    @application.on_event("startup")
    async def startup_event():
        """Build the container and make sure the indexes exist."""
        from storefront.di.container import get_container

        container = get_container()
        container.get("mongo_client").ensure_indexes()

        settings = get_settings()
        if settings.website_id is None:
            logger.warning("[main] WEBSITE_ID not set; requests must send X-Website-Id")
        else:
            logger.info("[main] Serving website %s", settings.website_id)
        logger.info("[main] Order service started")

    @application.on_event("shutdown")
    async def shutdown_event():
        """Flush pending order events and close the database connection."""
        from storefront.di.container import get_container
        from storefront.utils.event_notifier import OrderEventNotifier

        container = get_container()
        container.get(OrderEventNotifier).close()
        container.get("mongo_client").close()
        logger.info("[main] Order service stopped")

    @application.get("/")
    async def root():
        """Root endpoint - service info."""
        return {
            "status": "running",
            "service": "Storefront Order API",
            "version": "1.0.0",
            "docs": "/docs"
        }

    @application.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy"}

    return application


# Create application instance
app = create_application()
