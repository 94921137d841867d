"""
Order Event Notifier
====================

Publishes order lifecycle events to Kafka so that mailers and the admin
dashboard can react (order confirmation, status update e-mails).

Delivery is best effort: a failed publish is logged and reported as
False, it never undoes the order it describes.
"""
import json
import logging
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional

from kafka import KafkaProducer
from kafka.errors import KafkaError

from storefront.core.config import Settings, get_settings
from storefront.domain.models.order import Order, OrderStatus
from storefront.utils.datetime_utils import now, to_iso

logger = logging.getLogger(__name__)

ORDER_PLACED = "order.placed"
ORDER_STATUS_CHANGED = "order.status_changed"


def serialize_for_json(obj: Any) -> Any:
    """
    Recursively serialize objects for JSON encoding.
    Datetimes become ISO strings, Decimals become strings (no float rounding),
    enums become their values.
    """
    if isinstance(obj, datetime):
        return to_iso(obj)
    elif isinstance(obj, Decimal):
        return str(obj)
    elif isinstance(obj, Enum):
        return obj.value
    elif isinstance(obj, dict):
        return {key: serialize_for_json(value) for key, value in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [serialize_for_json(item) for item in obj]
    else:
        return obj


class OrderEventNotifier:
    """Kafka publisher for order events. The producer is created on first use."""

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings or get_settings()
        self._producer: Optional[KafkaProducer] = None

    @property
    def enabled(self) -> bool:
        return self._settings.order_events_enabled

    def _get_producer(self) -> Optional[KafkaProducer]:
        if self._producer is None:
            try:
                logger.info(
                    "[event_notifier] Connecting to Kafka: %s", self._settings.kafka_bootstrap_servers
                )
                self._producer = KafkaProducer(
                    bootstrap_servers=self._settings.kafka_bootstrap_servers,
                    value_serializer=lambda v: json.dumps(v).encode("utf-8"),
                    retries=3,
                    acks="all",
                    max_in_flight_requests_per_connection=1,  # Ensure ordering per order key
                    request_timeout_ms=30000,
                )
            except KafkaError as e:
                logger.error("[event_notifier] Failed to initialize Kafka producer: %s", e)
                return None
        return self._producer

    def publish(self, event_type: str, order_id: int, data: Dict[str, Any]) -> bool:
        """
        Publish one event keyed by order id.

        Returns:
            True if the broker acknowledged the event, False otherwise
        """
        if not self.enabled:
            return False

        producer = self._get_producer()
        if producer is None:
            logger.warning("[event_notifier] Kafka producer not available, skipping %s", event_type)
            return False

        payload = {
            "type": event_type,
            "order_id": order_id,
            "timestamp": to_iso(now()),
            "data": serialize_for_json(data),
        }
        try:
            future = producer.send(
                self._settings.kafka_orders_topic,
                value=payload,
                key=str(order_id).encode("utf-8"),
            )
            record_metadata = future.get(timeout=10)
            logger.info(
                "[event_notifier] Published %s for order %s (partition %s, offset %s)",
                event_type, order_id, record_metadata.partition, record_metadata.offset,
            )
            return True
        except KafkaError as e:
            logger.error("[event_notifier] Kafka error publishing %s for order %s: %s", event_type, order_id, e)
            return False

    def order_placed(self, order: Order, contact_email: Optional[str] = None) -> bool:
        return self.publish(
            ORDER_PLACED,
            order.id,
            {
                "website_id": order.website_id,
                "user_id": order.owner_id,
                "contact_email": contact_email or order.guest_email,
                "total_amount": order.total_amount,
                "payment_method": order.payment_method,
                "payment_status": order.payment_status,
                "items": [
                    {"product_id": line.product_id, "quantity": line.quantity, "price": line.price}
                    for line in order.lines
                ],
            },
        )

    def order_status_changed(self, order: Order, previous: OrderStatus) -> bool:
        return self.publish(
            ORDER_STATUS_CHANGED,
            order.id,
            {
                "website_id": order.website_id,
                "user_id": order.owner_id,
                "guest_email": order.guest_email,
                "previous_status": previous,
                "status": order.status,
            },
        )

    def close(self) -> None:
        if self._producer is not None:
            self._producer.flush()
            self._producer.close()
            self._producer = None
