from datetime import UTC, date, datetime


def utcnow_naive():
    """Return current UTC timestamp as naive datetime for DB timestamp columns."""
    return datetime.now(UTC).replace(tzinfo=None)


def today():
    """Current UTC calendar date."""
    return datetime.now(UTC).date()


def parse_booking_date(raw_value):
    """Parse a YYYY-MM-DD value; returns None when it cannot be parsed."""
    if isinstance(raw_value, datetime):
        return raw_value.date()
    if isinstance(raw_value, date):
        return raw_value
    try:
        return date.fromisoformat(str(raw_value or '').strip())
    except ValueError:
        return None
