from datetime import datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


def get_current_time_in_timezone(timezone_str: str = "UTC") -> datetime:
    """Get Current Time in Specified Timezone

    Args:
        timezone_str (str): Timezone string (e.g., "Asia/Jakarta")

    Returns:
        datetime: Current datetime in the specified timezone
    """
    try:
        tz = ZoneInfo(timezone_str)
    except (ZoneInfoNotFoundError, ValueError):
        tz = ZoneInfo("UTC")
    return datetime.now(tz)


def to_timezone(value: datetime, timezone_str: str = "UTC") -> datetime:
    """Express an aware datetime in the given timezone, naive ones are kept as is."""
    if value.tzinfo is None:
        return value
    try:
        tz = ZoneInfo(timezone_str)
    except (ZoneInfoNotFoundError, ValueError):
        tz = ZoneInfo("UTC")
    return value.astimezone(tz)
