"""
Date and time conversion for BaseStation message fields.
"""
import logging
import time
from datetime import datetime
from typing import Optional

logger = logging.getLogger(__name__)

_DATETIME_FORMATS = ("%Y/%m/%d %H:%M:%S.%f", "%Y/%m/%d %H:%M:%S")


def date_to_epoch(date_s: Optional[str], time_s: Optional[str]) -> Optional[int]:
    """
    Convert a feed date ("2024/01/31") and time ("12:34:56.789") to epoch seconds.

    The feed stamps messages in the receiver's local time. Fractional seconds
    are truncated. Returns None if either field cannot be parsed.
    """
    if not date_s or not time_s:
        return None

    value = f"{date_s.strip()} {time_s.strip()}"
    for fmt in _DATETIME_FORMATS:
        try:
            return int(datetime.strptime(value, fmt).timestamp())
        except (ValueError, OverflowError, OSError):
            continue

    logger.debug(f"Unparseable timestamp: {value!r}")
    return None


def format_ctime(epoch: float) -> str:
    """Format epoch seconds like ctime(3), without the trailing newline."""
    return time.ctime(epoch)
