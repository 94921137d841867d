"""Retrying units of work that lost a write conflict."""
import logging
from typing import Callable, Optional, TypeVar

from storefront.domain.exceptions import ConcurrentUpdateError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def retry_on_conflict(work: Callable[[], T], max_retries: int, order_id: Optional[int] = None) -> T:
    """
    Run work, running it again each time it raises ConcurrentUpdateError.

    work must open its own unit of work so every attempt starts from a
    fresh transaction. After max_retries retries the conflict propagates.
    """
    attempt = 0
    while True:
        attempt += 1
        try:
            return work()
        except ConcurrentUpdateError:
            if attempt > max_retries:
                logger.error("Order %s still conflicting after %d attempts", order_id, attempt)
                raise
            logger.warning("Order %s hit a write conflict, retrying (attempt %d)", order_id, attempt)
