"""UTC date/time parsing and formatting for ledgers, reports and CLI flags."""

from datetime import date, datetime, timedelta, timezone

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
HUMAN_FORMAT = "%Y-%m-%d %H:%M:%S"

_DATETIME_FORMATS = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d",
)


def parse_utc_datetime(value: str) -> datetime:
    """Parse a UTC date/time string into an aware datetime.

    Accepts 'YYYY-MM-DD HH:MM:SS', 'YYYY-MM-DD HH:MM', 'YYYY-MM-DD'
    (midnight assumed) and ISO-8601 with a 'T' separator and optional
    'Z' or offset. Naive values are taken to be UTC.

    Raises:
        ValueError: If the string matches none of the accepted forms.
    """
    text = value.strip()
    for fmt in _DATETIME_FORMATS:
        try:
            return datetime.strptime(text, fmt).replace(tzinfo=timezone.utc)
        except ValueError:
            continue

    if "T" in text:
        iso = text[:-1] + "+00:00" if text.endswith("Z") else text
        try:
            parsed = datetime.fromisoformat(iso)
        except ValueError:
            pass
        else:
            return ensure_utc(parsed)

    raise ValueError(f"invalid date: {value}")


def parse_date(value: str) -> date:
    """Parse a 'YYYY-MM-DD' string."""
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except ValueError as e:
        raise ValueError(f"invalid date: {value}") from e


def ensure_utc(value: datetime) -> datetime:
    """Return value as an aware UTC datetime (naive values are taken as UTC)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_utc_datetime(value: datetime) -> str:
    """Render an instant as 'YYYY-MM-DD HH:MM:SS' in UTC."""
    return ensure_utc(value).strftime(HUMAN_FORMAT)


def to_millis(value: datetime) -> int:
    """UNIX timestamp in milliseconds."""
    return (ensure_utc(value) - EPOCH) // timedelta(milliseconds=1)


def from_millis(value: int) -> datetime:
    """Aware UTC datetime from a UNIX timestamp in milliseconds."""
    return EPOCH + timedelta(milliseconds=value)
