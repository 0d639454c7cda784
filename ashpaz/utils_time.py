from datetime import datetime, timezone


def utc_now():
    """Return the current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def format_datetime_iso(dt: datetime) -> str:
    """
    Format a datetime as an ISO-8601 string in UTC.
    Naive datetimes (as returned by SQLite) are assumed to be UTC already.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat()
