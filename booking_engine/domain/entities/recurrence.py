from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from enum import Enum


class RecurrenceType(str, Enum):
    weekly = "weekly"
    biweekly = "biweekly"
    monthly = "monthly"


@dataclass(frozen=True)
class RecurrencePattern:
    recurrence_type: RecurrenceType
    anchor_date: date
    anchor_time: time
    end_date: date  # inclusive
    weekdays: tuple[int, ...] | None = None  # weekly/biweekly only, 0 = Monday

    def __post_init__(self) -> None:
        if self.weekdays is None:
            return
        if self.recurrence_type == RecurrenceType.monthly:
            raise ValueError("Weekday selectors are only supported for weekly and biweekly patterns")
        invalid = [d for d in self.weekdays if not 0 <= d <= 6]
        if invalid:
            raise ValueError(f"Weekday selectors must be between 0 and 6, got {invalid}")


@dataclass(frozen=True)
class Occurrence:
    date: date
    time: time
