"""
Time-of-day windows on a 24-hour clock.

All arithmetic is done in minutes since midnight (0-1439). A window is
half-open, [start, end). When start is later than end the window wraps past
midnight; both shapes are evaluated explicitly instead of through date
arithmetic, which gets the wrapping case wrong.
"""
from datetime import datetime, time, timezone
from typing import Optional, Union

MINUTES_PER_DAY = 24 * 60

ClockValue = Union[str, time]


def parse_clock(value: ClockValue) -> int:
    """
    Convert "HH:MM", "HH:MM:SS" or a `datetime.time` to minutes since midnight.

    Seconds are ignored. Raises ValueError on anything else.
    """
    if isinstance(value, time):
        return value.hour * 60 + value.minute

    parts = str(value).strip().split(":")
    if len(parts) not in (2, 3) or not all(p.isdigit() for p in parts):
        raise ValueError(f"Invalid clock value: {value!r}")

    hours, minutes = int(parts[0]), int(parts[1])
    if not (0 <= hours < 24 and 0 <= minutes < 60):
        raise ValueError(f"Clock value out of range: {value!r}")
    return hours * 60 + minutes


def minutes_since_midnight(moment: datetime) -> int:
    """UTC wall-clock minutes of `moment`. Naive datetimes are taken as UTC."""
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.hour * 60 + moment.minute


def is_within_window(current: int, start: int, end: int) -> bool:
    """
    Is `current` inside the window [start, end)?

    start < end   ->  start <= current < end
    start > end   ->  current >= start or current < end   (crosses midnight)
    start == end  ->  empty window, never inside
    """
    if start == end:
        return False
    if start < end:
        return start <= current < end
    return current >= start or current < end


def is_in_quiet_hours(preference, now: datetime) -> bool:
    """
    Whether `now` falls inside the preference's quiet hours.

    No preference, or a preference with either bound unset, means no quiet
    hours.
    """
    if preference is None:
        return False

    start: Optional[ClockValue] = getattr(preference, "quiet_hours_start", None)
    end: Optional[ClockValue] = getattr(preference, "quiet_hours_end", None)
    if not start or not end:
        return False

    return is_within_window(
        minutes_since_midnight(now),
        parse_clock(start),
        parse_clock(end),
    )
