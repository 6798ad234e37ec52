"""
Availability resolver - is a contractor available right now?

Three independent signals are combined:
  1. availability_status   must be 'available'
  2. busy_until            must be unset or already in the past
  3. working_hours         today's entry, if any, must be enabled and the
                           current HH:MM must fall inside [start, end]

'available' alone is necessary but not sufficient.
"""
from datetime import datetime, timezone, tzinfo
from typing import Any, Optional, Union

from marketplace.schemas.contractor import WEEKDAYS, WorkingHours


def coerce_working_hours(raw: Union[None, dict, WorkingHours]) -> Optional[WorkingHours]:
    """
    Turn the stored JSON mapping into a WorkingHours.

    Raises pydantic.ValidationError (a ValueError) on unknown weekday keys or
    badly formatted clock values.
    """
    if raw is None or isinstance(raw, WorkingHours):
        return raw
    if not raw:
        return None
    return WorkingHours.model_validate(raw)


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def weekday_name(moment: datetime) -> str:
    """Lower-case English weekday name, independent of process locale."""
    return WEEKDAYS[moment.weekday()]


def is_within_working_hours(
    working_hours: Optional[WorkingHours],
    now: datetime,
    tz: Optional[tzinfo] = None,
) -> bool:
    """
    Check today's schedule entry.

    `now` is shifted into `tz` (the zone schedules are written in) before
    reading the weekday and clock.
    """
    if working_hours is None:
        return True

    local_now = _as_utc(now).astimezone(tz) if tz is not None else now
    schedule = working_hours.for_day(weekday_name(local_now))
    if schedule is None:
        return True

    if not schedule.enabled:
        return False

    if schedule.start and schedule.end:
        # Both sides are zero-padded 24h "HH:MM", so string order is time order
        current = local_now.strftime("%H:%M")
        if current < schedule.start or current > schedule.end:
            return False

    return True


def is_currently_available(
    profile: Any,
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> bool:
    """
    Resolve a contractor's live availability.

    `profile` is anything exposing availability_status, busy_until and
    working_hours (ORM row or schema).
    """
    now = _as_utc(now or datetime.now(timezone.utc))

    status = getattr(profile, "availability_status", None) or "available"
    if status != "available":
        return False

    busy_until = getattr(profile, "busy_until", None)
    if busy_until is not None and now < _as_utc(busy_until):
        return False

    working_hours = coerce_working_hours(getattr(profile, "working_hours", None))
    return is_within_working_hours(working_hours, now, tz)
