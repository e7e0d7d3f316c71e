import logging
from datetime import date, datetime

import pytz

from config import DEFAULT_TIMEZONE


def resolve_timezone(tz_name: str = None):
    tz_name = tz_name or DEFAULT_TIMEZONE
    try:
        return pytz.timezone(tz_name)
    except pytz.UnknownTimeZoneError:
        logging.warning(f"⚠️ [CLOCK] Unknown timezone {tz_name!r}, using {DEFAULT_TIMEZONE}")
        return pytz.timezone(DEFAULT_TIMEZONE)


def now_utc() -> datetime:
    return datetime.now(pytz.utc)


def local_today(tz_name: str = None) -> date:
    """Calendar date for a profile's timezone."""
    return now_utc().astimezone(resolve_timezone(tz_name)).date()
