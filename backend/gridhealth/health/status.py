"""Device connectivity classification.

Status depends on last_seen recency only. It never looks at the health
score: a perfectly healthy device that stopped phoning in is offline.
"""

from datetime import datetime, timedelta, timezone

from gridhealth.health.models import DeviceStatus

DEFAULT_ONLINE_WINDOW = timedelta(minutes=5)
DEFAULT_WARNING_WINDOW = timedelta(minutes=30)

UPTIME_BY_STATUS = {
    DeviceStatus.ONLINE: 100,
    DeviceStatus.WARNING: 80,
    DeviceStatus.OFFLINE: 0,
}


def classify_status(
    last_seen: datetime | str | None,
    now: datetime | None = None,
    online_window: timedelta = DEFAULT_ONLINE_WINDOW,
    warning_window: timedelta = DEFAULT_WARNING_WINDOW,
) -> tuple[DeviceStatus, int]:
    """Map last contact time to (status, uptime_percentage).

    Args:
        last_seen: Last contact; naive datetimes and ISO strings are read as UTC
        now: Reference time (defaults to current UTC time)
        online_window: Max elapsed time still considered online
        warning_window: Max elapsed time still considered warning

    Returns:
        (ONLINE, 100) within online_window, (WARNING, 80) within
        warning_window, otherwise (OFFLINE, 0). No last_seen is OFFLINE.

    Examples:
        last_seen=now         -> (ONLINE, 100)
        last_seen=now - 10min -> (WARNING, 80)
        last_seen=now - 40min -> (OFFLINE, 0)
        last_seen=None        -> (OFFLINE, 0)
    """
    seen = as_utc(last_seen)
    if seen is None:
        return DeviceStatus.OFFLINE, UPTIME_BY_STATUS[DeviceStatus.OFFLINE]

    reference = as_utc(now) or datetime.now(tz=timezone.utc)
    elapsed = reference - seen

    if elapsed <= online_window:
        status = DeviceStatus.ONLINE
    elif elapsed <= warning_window:
        status = DeviceStatus.WARNING
    else:
        status = DeviceStatus.OFFLINE
    return status, UPTIME_BY_STATUS[status]


def as_utc(value: datetime | str | None) -> datetime | None:
    """Normalize a timestamp to an aware UTC datetime.

    Unparseable strings are treated as missing.
    """
    if value is None:
        return None
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
