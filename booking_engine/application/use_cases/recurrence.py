from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta

from booking_engine.domain.entities.recurrence import Occurrence, RecurrencePattern, RecurrenceType

DEFAULT_MAX_OCCURRENCES = 52

_STRIDE_DAYS = {
    RecurrenceType.weekly: 7,
    RecurrenceType.biweekly: 14,
}


@dataclass(frozen=True)
class RecurrenceExpansion:
    occurrences: list[Occurrence] = field(default_factory=list)
    capped: bool = False  # more occurrences existed than the cap allowed
    skipped_dates: list[date] = field(default_factory=list)  # monthly: 1st of each month lacking the anchor day


def expand_pattern(
    pattern: RecurrencePattern,
    max_occurrences: int = DEFAULT_MAX_OCCURRENCES,
) -> RecurrenceExpansion:
    """
    Target dates of a recurring series, in order, independent of availability.

    Weekly and biweekly patterns repeat the anchor weekday (or each selected
    weekday) every 7 or 14 days. Monthly patterns repeat the anchor day-of-month
    and skip months that do not have it. At most max_occurrences are returned.
    """
    if max_occurrences < 1:
        raise ValueError(f"max_occurrences must be >= 1, got {max_occurrences}")

    if pattern.recurrence_type == RecurrenceType.monthly:
        dates, skipped = _monthly_dates(pattern, max_occurrences + 1)
    else:
        dates, skipped = _weekly_dates(pattern, _STRIDE_DAYS[pattern.recurrence_type], max_occurrences + 1), []

    capped = len(dates) > max_occurrences
    dates = dates[:max_occurrences]
    if capped:
        skipped = [d for d in skipped if d <= dates[-1]]
    return RecurrenceExpansion(
        occurrences=[Occurrence(date=d, time=pattern.anchor_time) for d in dates],
        capped=capped,
        skipped_dates=skipped,
    )


def expand(pattern: RecurrencePattern, max_occurrences: int = DEFAULT_MAX_OCCURRENCES) -> list[Occurrence]:
    return expand_pattern(pattern, max_occurrences).occurrences


def _weekly_dates(pattern: RecurrencePattern, stride_days: int, limit: int) -> list[date]:
    dates: list[date] = []
    week_start = pattern.anchor_date
    while week_start <= pattern.end_date and len(dates) < limit:
        if not pattern.weekdays:
            dates.append(week_start)
        else:
            for offset in range(7):
                day = week_start + timedelta(days=offset)
                if day > pattern.end_date or len(dates) >= limit:
                    break
                if day.weekday() in pattern.weekdays:
                    dates.append(day)
        week_start += timedelta(days=stride_days)
    return dates


def _monthly_dates(pattern: RecurrencePattern, limit: int) -> tuple[list[date], list[date]]:
    dates: list[date] = []
    skipped: list[date] = []
    anchor_day = pattern.anchor_date.day
    year, month = pattern.anchor_date.year, pattern.anchor_date.month
    while date(year, month, 1) <= pattern.end_date and len(dates) < limit:
        try:
            candidate = date(year, month, anchor_day)
        except ValueError:
            skipped.append(date(year, month, 1))
        else:
            if candidate <= pattern.end_date:
                dates.append(candidate)
        month += 1
        if month > 12:
            year, month = year + 1, 1
    return dates, skipped
