"""
Business calendar — which days the factory works.

Default rule is Monday–Friday. Two overrides, both plain data:
  - holidays: dates the factory is closed, with a display name
  - working_weekends: Saturdays/Sundays substituted as working days

A date listed in both is treated as a holiday. That overlap is a data-quality
problem in the calendar source, so it is logged (or raised, in strict mode).
"""

import logging
from datetime import date, timedelta
from typing import Dict, FrozenSet

from pydantic import BaseModel, Field

from .errors import CalendarConflict

logger = logging.getLogger(__name__)

WEEKDAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


class Calendar(BaseModel):
    version: str = "unversioned"
    holidays: Dict[date, str] = Field(default_factory=dict)
    working_weekends: FrozenSet[date] = frozenset()

    class Config:
        frozen = True

    @classmethod
    def build(cls, holidays=None, working_weekends=None, version: str = "unversioned",
              strict: bool = False) -> "Calendar":
        """
        Construct a calendar and check the holiday/working-weekend overlap.

        holidays may be a dict {date: name} or an iterable of dates (named "Holiday").
        """
        if holidays is None:
            holidays = {}
        elif not isinstance(holidays, dict):
            holidays = {d: "Holiday" for d in holidays}
        calendar = cls(
            version=version,
            holidays=holidays,
            working_weekends=frozenset(working_weekends or ()),
        )
        calendar.check_conflicts(strict=strict)
        return calendar

    def conflicts(self) -> FrozenSet[date]:
        return self.working_weekends & frozenset(self.holidays)

    def check_conflicts(self, strict: bool = False) -> None:
        overlap = self.conflicts()
        if not overlap:
            return
        if strict:
            raise CalendarConflict(overlap)
        logger.warning(
            "Calendar %s lists %d date(s) as both holiday and working weekend; "
            "holiday takes precedence: %s",
            self.version, len(overlap), ", ".join(sorted(d.isoformat() for d in overlap)),
        )

    # --- Classification ---

    def is_holiday(self, day: date) -> bool:
        return day in self.holidays

    def is_working_weekend(self, day: date) -> bool:
        return day in self.working_weekends

    def is_working_day(self, day: date) -> bool:
        if self.is_holiday(day):
            return False
        if self.is_working_weekend(day):
            return True
        return day.weekday() < 5

    def day_label(self, day: date) -> str:
        """Holiday name if the day is a holiday, else its weekday name."""
        if self.is_holiday(day):
            return self.holidays[day]
        return WEEKDAY_NAMES[day.weekday()]


EMPTY_CALENDAR = Calendar()


def rush_adjusted_days(requested_days: int, max_reduction: int = 2) -> int:
    """
    Production days left after rush compression.

    The reduction is capped at max_reduction and at requested_days - 1, so a
    rush order always keeps at least one production day.
    """
    reduction = max(0, min(max_reduction, requested_days - 1))
    return max(1, requested_days - reduction)


def next_working_day(day: date, calendar: Calendar) -> date:
    """First working day strictly after the given date."""
    current = day + timedelta(days=1)
    while not calendar.is_working_day(current):
        current += timedelta(days=1)
    return current


def working_days_between(start: date, end: date, calendar: Calendar) -> int:
    """Count working days in [start, end], both ends inclusive."""
    count = 0
    current = start
    while current <= end:
        if calendar.is_working_day(current):
            count += 1
        current += timedelta(days=1)
    return count
