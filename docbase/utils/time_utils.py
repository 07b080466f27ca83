"""
Time Utilities

Human readable and epoch timestamps for audit fields.
"""
import time
from datetime import datetime, timezone, tzinfo
from typing import Optional, Tuple
from zoneinfo import ZoneInfo

from docbase.config import get_settings

TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def _zone(name: Optional[str] = None) -> tzinfo:
    name = name or get_settings().timezone
    if name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name)


def format_time_as_reader(epoch: int, tz_name: Optional[str] = None) -> str:
    """Format epoch seconds as a readable timestamp in the configured timezone"""
    return datetime.fromtimestamp(epoch, tz=_zone(tz_name)).strftime(TIME_FORMAT)


def now_stamp(tz_name: Optional[str] = None) -> Tuple[str, int]:
    """
    Current time in both audit forms.

    Returns:
        str: Readable timestamp
        int: Epoch seconds of the same instant
    """
    epoch = int(time.time())
    return format_time_as_reader(epoch, tz_name), epoch
