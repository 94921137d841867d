"""
Centralized DateTime Utilities
==============================

Consistent datetime handling for order timestamps.
All datetime operations use the timezone configured in storefront.core.config.

Functions:
- now(): Returns timezone-aware datetime object
- to_iso(): Convert datetime object to ISO 8601 string
- ensure_aware(): Attach the application timezone to naive datetimes
  (MongoDB returns naive UTC datetimes unless tz_aware is set)
"""
import logging
import zoneinfo
from datetime import datetime, timezone as dt_timezone, tzinfo
from typing import Optional

from storefront.core.config import get_settings

logger = logging.getLogger(__name__)


def _get_app_timezone() -> tzinfo:
    """
    Get the application timezone from config.
    Returns timezone object (defaults to UTC if invalid).
    """
    tz_str = get_settings().timezone

    if tz_str.upper() == "UTC":
        return dt_timezone.utc

    try:
        return zoneinfo.ZoneInfo(tz_str)
    except (zoneinfo.ZoneInfoNotFoundError, ValueError):
        logger.warning("[datetime_utils] Invalid timezone '%s', falling back to UTC", tz_str)
        return dt_timezone.utc


def now() -> datetime:
    """
    Get current datetime with application-configured timezone.

    Returns:
        timezone-aware datetime object
    """
    return datetime.now(_get_app_timezone())


def ensure_aware(dt: Optional[datetime]) -> Optional[datetime]:
    """Treat naive datetimes as UTC (what the MongoDB driver hands back)."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=dt_timezone.utc)
    return dt


def to_iso(dt: Optional[datetime]) -> Optional[str]:
    """
    Convert datetime object to ISO 8601 string.

    Args:
        dt: datetime object (timezone-aware or naive)

    Returns:
        ISO 8601 formatted string ('Z' suffix for UTC), or None if dt is None
    """
    if dt is None:
        return None

    dt = ensure_aware(dt)
    if dt.utcoffset() == dt_timezone.utc.utcoffset(None):
        return dt.replace(microsecond=0).astimezone(dt_timezone.utc).isoformat().replace("+00:00", "Z")
    return dt.replace(microsecond=0).isoformat()
