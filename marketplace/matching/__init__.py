"""
Matching package - pure decision logic, no I/O.

Services load data and call these functions; nothing here touches the
database or the network.
"""
from marketplace.matching.time_window import (
    parse_clock,
    minutes_since_midnight,
    is_within_window,
    is_in_quiet_hours,
)
from marketplace.matching.availability import (
    coerce_working_hours,
    is_within_working_hours,
    is_currently_available,
)
from marketplace.matching.rules import (
    location_matches,
    skills_match,
    matches,
    matching_user_ids,
)

__all__ = [
    "parse_clock",
    "minutes_since_midnight",
    "is_within_window",
    "is_in_quiet_hours",
    "coerce_working_hours",
    "is_within_working_hours",
    "is_currently_available",
    "location_matches",
    "skills_match",
    "matches",
    "matching_user_ids",
]
