"""Null-propagating helpers shared by the parsing and scoring functions."""

import functools
import logging
from datetime import datetime, timezone
from typing import Callable, Optional, Union

logger = logging.getLogger(__name__)

# Formats seen in the raw feeds: ISO timestamps, plain dates, RSS dates and Apache logs
TIMESTAMP_FORMATS = [
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%dT%H:%M:%S.%f%z",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d",
    "%a, %d %b %Y %H:%M:%S %z",
    "%a, %d %b %Y %H:%M:%S %Z",
    "%a, %d %b %Y %H:%M:%S",
    "%d/%b/%Y:%H:%M:%S %z",
]


def null_safe(func: Callable) -> Callable:
    """Return None instead of calling `func` when any argument is None."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        if any(arg is None for arg in args) or any(value is None for value in kwargs.values()):
            return None
        return func(*args, **kwargs)
    return wrapper


def _from_epoch(seconds: Union[int, float]) -> Optional[datetime]:
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (ValueError, OverflowError, OSError):
        logger.debug(f"Epoch timestamp out of range: {seconds!r}")
        return None


@null_safe
def parse_timestamp(timestamp: Union[str, int, float]) -> Optional[datetime]:
    """Parse a timestamp string or epoch seconds; None when no format matches."""
    if isinstance(timestamp, (int, float)):
        return _from_epoch(timestamp)
    value = str(timestamp).strip()
    if not value:
        return None
    if value.isdigit():
        # Eight digits is a compact YYYYMMDD date, never epoch seconds
        if len(value) == 8:
            try:
                return datetime.strptime(value, "%Y%m%d")
            except ValueError:
                logger.debug(f"Unparseable compact date: {timestamp!r}")
                return None
        return _from_epoch(int(value))
    if value.endswith("Z"):
        value = value[:-1] + "+0000"
    for fmt in TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    logger.debug(f"Unparseable timestamp: {timestamp!r}")
    return None


@null_safe
def month_period(timestamp: Union[str, int, float]) -> Optional[str]:
    """Year-month period key (e.g. '2013-02') for a timestamp."""
    parsed = parse_timestamp(timestamp)
    return parsed.strftime("%Y-%m") if parsed else None


@null_safe
def day_period(timestamp: Union[str, int, float]) -> Optional[str]:
    """Year-month-day period key for a timestamp."""
    parsed = parse_timestamp(timestamp)
    return parsed.strftime("%Y-%m-%d") if parsed else None
