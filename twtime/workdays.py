"""
Working day policy: weekdays are working days, weekends are not
"""

from datetime import date, timedelta
from typing import Iterator

WEEKEND = (5, 6)  # Saturday, Sunday


def is_working_day(day: date) -> bool:
    return day.weekday() not in WEEKEND


def next_day(day: date) -> date:
    return day + timedelta(days=1)


def next_working_day(day: date) -> date:
    """First working day strictly after ``day``"""
    day = next_day(day)
    while not is_working_day(day):
        day = next_day(day)
    return day


def iter_days(start: date, end: date) -> Iterator[date]:
    """Every date from ``start`` up to but excluding ``end``"""
    day = start
    while day < end:
        yield day
        day = next_day(day)
