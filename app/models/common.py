import re
from datetime import UTC, date, datetime

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def utc_naive_now() -> datetime:
    """Naive UTC for TIMESTAMP WITHOUT TIME ZONE columns."""
    return datetime.now(UTC).replace(tzinfo=None)


def validate_slot_date(value: str) -> str:
    """Require a zero-padded YYYY-MM-DD calendar date; return it unchanged.

    Dates stay strings so that lexicographic order equals chronological order.
    """
    if not isinstance(value, str) or not _DATE_RE.match(value):
        raise ValueError("date must be in YYYY-MM-DD format")
    try:
        date.fromisoformat(value)
    except ValueError as e:
        raise ValueError(f"date is not a valid calendar date: {value}") from e
    return value


def validate_slot_time(value: str) -> str:
    # Slot labels ("09:00 am") are matched verbatim, never parsed
    if not isinstance(value, str) or not value or value != value.strip():
        raise ValueError("time must be a non-empty slot label without surrounding whitespace")
    return value
