"""Slot keys: canonical string identity for one (date, hour) cell of an event grid.

A key is the ISO date followed by the hour as a plain integer, e.g.
``"2024-06-01-14"`` or ``"2024-06-01-9"``. Only the canonical spelling parses,
so every key maps to exactly one cell and back.
"""

import re
from datetime import date as Date
from collections.abc import Iterable, Sequence

DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)
SLOT_KEY_RE = re.compile(r"(\d{4}-\d{2}-\d{2})-(\d{1,2})", re.ASCII)

MIN_HOUR = 0
MAX_HOUR = 23


class SlotKeyError(ValueError):
    """Raised when a string is not a canonical slot key."""

    def __init__(self, key: str, reason: str) -> None:
        self.key = key
        self.reason = reason
        super().__init__(f"invalid slot key {key!r}: {reason}")


class SlotOutsideEventError(ValueError):
    """Raised when a well-formed slot key does not belong to the event grid."""

    def __init__(self, key: str, reason: str) -> None:
        self.key = key
        self.reason = reason
        super().__init__(f"slot {key!r} is outside the event: {reason}")


def is_iso_date(value: str) -> bool:
    if not DATE_RE.fullmatch(value):
        return False
    try:
        Date.fromisoformat(value)
    except ValueError:
        return False
    return True


def make_slot_key(date: str, hour: int) -> str:
    if not is_iso_date(date):
        raise ValueError(f"invalid date: {date!r}")
    if not MIN_HOUR <= hour <= MAX_HOUR:
        raise ValueError(f"hour must be between {MIN_HOUR} and {MAX_HOUR}, got {hour}")
    return f"{date}-{hour}"


def parse_slot_key(key: str) -> tuple[str, int]:
    """Split a slot key into ``(date, hour)``.

    Raises:
        SlotKeyError: If the key is not exactly what ``make_slot_key`` produces.
    """
    m = SLOT_KEY_RE.fullmatch(key)
    if not m:
        raise SlotKeyError(key, "expected YYYY-MM-DD-H")
    date, hour_raw = m.group(1), m.group(2)
    if not is_iso_date(date):
        raise SlotKeyError(key, "not a calendar date")
    hour = int(hour_raw)
    if hour > MAX_HOUR:
        raise SlotKeyError(key, f"hour must be between {MIN_HOUR} and {MAX_HOUR}")
    if str(hour) != hour_raw:
        raise SlotKeyError(key, "hour must not be zero-padded")
    return date, hour


def event_slot_keys(dates: Iterable[str], start_hour: int, end_hour: int) -> list[str]:
    """All slot keys of an event grid, date-major, hours in ``[start_hour, end_hour)``."""
    return [make_slot_key(d, h) for d in dates for h in range(start_hour, end_hour)]


def validate_slot_key(key: str, dates: Sequence[str], start_hour: int, end_hour: int) -> tuple[str, int]:
    """Parse ``key`` and check it lies inside the event grid.

    Raises:
        SlotKeyError: Malformed key.
        SlotOutsideEventError: Date not in ``dates`` or hour outside ``[start_hour, end_hour)``.
    """
    date, hour = parse_slot_key(key)
    if date not in dates:
        raise SlotOutsideEventError(key, f"date {date} is not a candidate date")
    if not start_hour <= hour < end_hour:
        raise SlotOutsideEventError(key, f"hour {hour} is outside {start_hour}-{end_hour}")
    return date, hour
