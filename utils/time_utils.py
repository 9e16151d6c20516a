from datetime import datetime
from typing import Optional, Union

import pytz
from dateutil import parser as date_parser
from loguru import logger


def get_current_utc_time() -> datetime:
    """Gets the current time as a timezone-aware UTC datetime."""
    return datetime.now(pytz.utc)


def get_timestamp() -> str:
    """Get the current timestamp in ISO format."""
    return get_current_utc_time().isoformat()


def parse_timestamp(value: Union[str, datetime, None]) -> Optional[datetime]:
    """Parses an ISO string (or passes through a datetime) into an aware UTC datetime.

    Args:
        value: ISO-8601 string, datetime, or None.

    Returns:
        A timezone-aware datetime, or None when the value is empty or unparseable.
        Naive values are assumed to be UTC.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        try:
            dt = date_parser.parse(str(value))
        except (ValueError, OverflowError) as e:
            logger.warning(f"Could not parse timestamp {value!r}: {e}")
            return None
    if dt.tzinfo is None:
        dt = pytz.utc.localize(dt)
    return dt.astimezone(pytz.utc)


EPOCH = datetime(1970, 1, 1, tzinfo=pytz.utc)


def sort_key(value: Union[str, datetime, None]) -> datetime:
    """Sort key for publish timestamps; missing or invalid values sort oldest."""
    return parse_timestamp(value) or EPOCH
