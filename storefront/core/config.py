# Standard library imports
import os
from decimal import Decimal
from typing import Final, Optional
from dotenv import load_dotenv


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


def _env_optional_int(name: str) -> Optional[int]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return int(value)


class Settings:
    """
    Application settings loaded from environment variables.

    This class centralizes all configuration settings for the order service.
    All settings are loaded from environment variables with sensible defaults,
    except the storefront tenant which has to be configured explicitly.
    """

    def __init__(self) -> None:
        # Load environment variables from .env file
        load_dotenv()

        # Timezone Configuration
        # Default to UTC, but can be set via TIMEZONE env var (e.g., "UTC", "Europe/Berlin")
        self.timezone: Final[str] = os.getenv("TIMEZONE", "UTC")

        # Logging
        self.log_level: Final[str] = os.getenv("LOG_LEVEL", "INFO").upper()

        # Database Configuration
        # Transactions need a replica set (a single-node replica set is enough)
        self.mongo_uri: Final[str] = os.getenv("MONGO_URI", "mongodb://localhost:27017")
        self.mongo_database_name: Final[str] = os.getenv("DB_NAME", "storefront")

        # Collection Names
        self.orders_collection: Final[str] = os.getenv("ORDERS_COLLECTION", "orders")
        self.order_items_collection: Final[str] = os.getenv("ORDER_ITEMS_COLLECTION", "order_items")
        self.products_collection: Final[str] = os.getenv("PRODUCTS_COLLECTION", "products")
        self.users_collection: Final[str] = os.getenv("USERS_COLLECTION", "users")
        self.cart_collection: Final[str] = os.getenv("CART_COLLECTION", "cart")
        self.websites_collection: Final[str] = os.getenv("WEBSITES_COLLECTION", "websites")
        self.counters_collection: Final[str] = os.getenv("COUNTERS_COLLECTION", "counters")

        # Tenant served by this deployment. No fallback: requests without
        # X-Website-Id are rejected when this is unset.
        self.website_id: Final[Optional[int]] = _env_optional_int("WEBSITE_ID")

        # Checkout Policies
        self.strict_identity: Final[bool] = _env_bool("STRICT_IDENTITY", "false")
        self.price_tolerance: Final[Decimal] = Decimal(os.getenv("PRICE_TOLERANCE", "0.01"))
        self.transaction_max_retries: Final[int] = int(
            os.getenv("TRANSACTION_MAX_RETRIES", "3")
        )

        # Kafka Configuration (order events)
        self.order_events_enabled: Final[bool] = _env_bool("ORDER_EVENTS_ENABLED", "false")
        self.kafka_bootstrap_servers: Final[str] = os.getenv(
            "KAFKA_BOOTSTRAP_SERVERS",
            "localhost:9092"
        )
        self.kafka_orders_topic: Final[str] = os.getenv(
            "KAFKA_ORDERS_TOPIC",
            "storefront-orders"
        )


# Global settings instance (singleton pattern)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get application settings (singleton pattern)

    Returns:
        Settings instance with all configuration values
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next get_settings() re-reads the environment."""
    global _settings
    _settings = None
