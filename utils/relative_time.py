from datetime import datetime, timezone
from typing import Optional, Union

MINUTES_PER_HOUR = 60
MINUTES_PER_DAY = 1440


def _as_aware(value: Union[str, datetime]) -> datetime:
    if isinstance(value, str):
        # fromisoformat only learned the Z suffix in 3.11
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def format_relative_time(created_at: Union[str, datetime], now: Optional[datetime] = None) -> str:
    """
    Format how long ago something was created: "Just now", "5m", "3h" or "2d"

    :param created_at: the creation timestamp, as a datetime or an ISO-8601 string
    :param now: the reference time, defaults to the current UTC time
    :return: the short relative label, floored at each unit
    """
    now = _as_aware(now) if now is not None else datetime.now(timezone.utc)
    minutes = int((now - _as_aware(created_at)).total_seconds() // 60)

    if minutes < 1:
        return "Just now"
    if minutes < MINUTES_PER_HOUR:
        return f"{minutes}m"
    if minutes < MINUTES_PER_DAY:
        return f"{minutes // MINUTES_PER_HOUR}h"
    return f"{minutes // MINUTES_PER_DAY}d"
