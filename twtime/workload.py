"""
Workload computations: remaining quota per day, missing hours over a range
and the compact duration grammar used on the command line
"""

import logging
import re
from datetime import date
from typing import Iterable, Tuple

from .models import TimeEntry, TimeOff
from .workdays import is_working_day, iter_days

logger = logging.getLogger(__name__)

WORKING_DAY_HOURS = 8

DURATION_PATTERN = re.compile(r"(?:(\d+)d)?(?:(\d+)h)?")


def remaining_quota(day: date, entries: Iterable[TimeEntry], times_off: Iterable[TimeOff]) -> int:
    """Hours of ``day`` not yet covered by logged entries or declared time off"""
    remaining = WORKING_DAY_HOURS

    for entry in entries:
        if entry.work_date == day:
            remaining -= entry.hours

    # Time off is stored with string keys in the config file
    day_key = day.strftime("%Y-%m-%d")
    for time_off in times_off:
        if time_off.date == day_key:
            remaining -= time_off.hours

    return max(remaining, 0)


def missing_hours(since: date, entries: Iterable[TimeEntry], times_off: Iterable[TimeOff],
                  today: date) -> int:
    """Sum of the remaining quota of every working day from ``since`` to yesterday"""
    if today <= since:
        return 0

    entries = list(entries)
    times_off = list(times_off)

    missing = 0
    for day in iter_days(since, today):
        if is_working_day(day):
            quota = remaining_quota(day, entries, times_off)
            if quota:
                logger.debug(f"{day.isoformat()}: {quota}h missing")
            missing += quota

    return missing


def split_days_hours(total_hours: int) -> Tuple[int, int]:
    """Convert a number of hours to (working days, hours)"""
    return divmod(total_hours, WORKING_DAY_HOURS)


def parse_duration(text: str) -> int:
    """Parse ``<N>d<N>h`` into hours, a day being a working day

    >>> parse_duration("8d4h")
    68
    """
    match = DURATION_PATTERN.fullmatch(text.strip())
    if not match or (match.group(1) is None and match.group(2) is None):
        raise ValueError(
            f"Could not parse {text!r}. Expected format xxdyyh, "
            "for example 8d4h for 8 days and 4 hours."
        )

    days = int(match.group(1) or 0)
    hours = int(match.group(2) or 0)
    return days * WORKING_DAY_HOURS + hours
