"""
Delivery date estimator — turns a production-day count into a promised date.

Walks forward one calendar day at a time from the day after the order,
counting working days and recording every skipped day, until the (rush
adjusted) production-day count is consumed. The delivery date is the last
working day consumed.
"""

import logging
from datetime import date, datetime, timedelta

from .business_calendar import (
    EMPTY_CALENDAR,
    Calendar,
    next_working_day,
    rush_adjusted_days,
    working_days_between,
)
from .errors import InvalidProductionDays
from .schemas import DeliveryResult

logger = logging.getLogger(__name__)

__all__ = [
    "estimate_delivery_date",
    "simple_delivery_date",
    "is_working_day",
    "next_working_day",
    "working_days_between",
]


def estimate_delivery_date(production_days: int, start_instant, is_urgent: bool = False,
                           calendar: Calendar = None, cutoff_hour: int = 20,
                           max_rush_reduction: int = 2) -> DeliveryResult:
    """
    Promised completion date for an order placed at start_instant.

    start_instant may be a datetime or a plain date; a date has no time of day,
    so the cutoff rule never applies to it.
    """
    if isinstance(production_days, bool) or not isinstance(production_days, int) \
            or production_days < 1:
        raise InvalidProductionDays(production_days)
    calendar = calendar or EMPTY_CALENDAR

    if isinstance(start_instant, datetime):
        start_day = start_instant.date()
        hour = start_instant.hour
    else:
        start_day = start_instant
        hour = None

    reason = []
    adjusted = production_days
    if is_urgent:
        adjusted = rush_adjusted_days(production_days, max_rush_reduction)
        reason.append(
            f"Rush service: {production_days} -> {adjusted} working days "
            f"(-{production_days - adjusted})"
        )
    reason.append(f"Order date {start_day.isoformat()}: {adjusted} working days required")

    current = start_day + timedelta(days=1)
    if hour is not None and hour >= cutoff_hour:
        current += timedelta(days=1)
        reason.append(
            f"Order placed at {start_instant:%H:%M}, after the {cutoff_hour}:00 "
            f"cutoff: counting starts a day later"
        )

    skipped_days = []
    working = 0
    walked = 0
    while True:
        walked += 1
        label = f"{current.isoformat()} ({calendar.day_label(current)})"
        if calendar.is_working_day(current):
            working += 1
            reason.append(f"{label}: working day {working}")
            if working == adjusted:
                break
        else:
            skipped_days.append(label)
            reason.append(f"{label}: skipped")
        current += timedelta(days=1)

    reason.append(
        f"Estimated completion {current.isoformat()} "
        f"({walked} calendar days, {working} working days)"
    )
    if skipped_days:
        reason.append(f"Skipped {len(skipped_days)} days")

    logger.debug(
        "Delivery for %d days from %s (urgent=%s): %s",
        production_days, start_day, is_urgent, current,
    )
    return DeliveryResult(
        delivery_date=current,
        requested_days=production_days,
        adjusted_days=adjusted,
        actual_working_days=working,
        total_calendar_days=walked,
        skipped_days=skipped_days,
        reason=reason,
        is_urgent=is_urgent,
    )


def simple_delivery_date(production_days: int, start, calendar: Calendar = None) -> date:
    """Delivery date only, no rush, for quick previews."""
    return estimate_delivery_date(production_days, start, False, calendar).delivery_date


def is_working_day(day: date, calendar: Calendar = None) -> bool:
    return (calendar or EMPTY_CALENDAR).is_working_day(day)
