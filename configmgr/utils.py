"""
utils.py
--------
Typed accessors for booking configuration.

Lookup order for every key:
1) configmgr.SystemSetting row (editable in the admin),
2) settings.SALON_BOOKING[key] (environment-driven defaults),
3) the hard-coded fallback passed by the caller.
"""

import logging

from django.conf import settings

from .models import SystemSetting

logger = logging.getLogger(__name__)

SLOT_INTERVAL_MINUTES = "SLOT_INTERVAL_MINUTES"
MIN_BOOKING_LEAD_MINUTES = "MIN_BOOKING_LEAD_MINUTES"
BOOKING_WINDOW_DAYS = "BOOKING_WINDOW_DAYS"
CURRENCY_CODE = "CURRENCY_CODE"


def _default(key, fallback):
    return getattr(settings, "SALON_BOOKING", {}).get(key, fallback)


def get_setting(key: str, fallback=None):
    row = SystemSetting.objects.filter(key=key).first()
    if row is not None:
        return row.value
    return _default(key, fallback)


def get_int_setting(key: str, fallback: int, minimum: int = 0) -> int:
    """
    Integer setting with validation.
    A stored value that is not an integer, or is below `minimum`, is ignored
    in favour of the project default.
    """
    default = int(_default(key, fallback))
    raw = get_setting(key, default)
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        logger.warning("Ignoring malformed setting %s=%r; using %s", key, raw, default)
        return default
    if value < minimum:
        logger.warning("Ignoring out-of-range setting %s=%r; using %s", key, raw, default)
        return default
    return value


def slot_interval_minutes() -> int:
    return get_int_setting(SLOT_INTERVAL_MINUTES, 30, minimum=1)


def min_booking_lead_minutes() -> int:
    return get_int_setting(MIN_BOOKING_LEAD_MINUTES, 60, minimum=0)


def booking_window_days() -> int:
    return get_int_setting(BOOKING_WINDOW_DAYS, 30, minimum=0)


def currency_code() -> str:
    return str(get_setting(CURRENCY_CODE, "ZAR"))
