from datetime import datetime
from time import time_ns
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .config import settings
from .errors import ConfigError


def now_millis() -> int:
    return time_ns() // 1_000_000


def resolve_zone(tz: str | ZoneInfo | None = None) -> ZoneInfo:
    if isinstance(tz, ZoneInfo):
        return tz
    key = tz or settings.timezone
    try:
        return ZoneInfo(key)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigError(f"Unknown timezone: {key!r}") from e


def human_readable_time(epoch_millis: int, tz: str | ZoneInfo | None = None) -> str:
    """Render epoch millis as ``yyyy-MM-dd-h-mm-ssa`` (e.g. ``2024-03-05-1-07-09PM``).

    The AM/PM marker is fixed English so the log does not depend on locale.
    """
    dt = datetime.fromtimestamp(epoch_millis // 1000, resolve_zone(tz))
    hour = dt.hour % 12 or 12
    marker = "AM" if dt.hour < 12 else "PM"
    return f"{dt:%Y-%m-%d}-{hour}-{dt:%M-%S}{marker}"
