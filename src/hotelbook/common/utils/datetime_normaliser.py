from datetime import datetime, timezone
from decimal import Decimal


def from_iso_string(value: str) -> datetime:
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        raise ValueError("Stored datetime must be timezone-aware")
    return dt.astimezone(timezone.utc)


def to_iso_string(dt: datetime | str) -> str:
    if isinstance(dt, str):
        dt = datetime.fromisoformat(dt)
    if dt.tzinfo is None:
        raise ValueError("Datetime must be timezone-aware")
    return dt.astimezone(timezone.utc).isoformat()


def from_stored(value) -> datetime:
    """Normalise a stored date attribute to an aware UTC datetime.

    Items written by this service hold ISO-8601 strings; items written by
    other tools may hold epoch seconds as a DynamoDB number.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            raise ValueError("Stored datetime must be timezone-aware")
        return value.astimezone(timezone.utc)
    if isinstance(value, (Decimal, int, float)):
        return datetime.fromtimestamp(float(value), tz=timezone.utc)
    if isinstance(value, str):
        return from_iso_string(value.replace("Z", "+00:00"))
    raise ValueError(f"Unsupported stored datetime value: {value!r}")


def ensure_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
