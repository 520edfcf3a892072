from __future__ import annotations

from datetime import time

from booking_engine.domain.entities.availability_window import AvailabilityWindow

DEFAULT_STEP_MINUTES = 15
MINUTES_PER_DAY = 24 * 60


def time_to_minutes(value: time) -> int:
    """Minutes since midnight."""
    return value.hour * 60 + value.minute


def minutes_to_time(minutes: int) -> time:
    """Inverse of time_to_minutes. Raises ValueError outside a single day."""
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise ValueError(f"Minute offset out of range for a day: {minutes}")
    return time(hour=minutes // 60, minute=minutes % 60)


def parse_hours_range(value: str) -> tuple[time, time]:
    """Parse "HH:MM-HH:MM" into (start, end)."""
    parts = value.split("-")
    if len(parts) != 2:
        raise ValueError(f"Expected HH:MM-HH:MM, got {value!r}")
    start = time.fromisoformat(parts[0].strip())
    end = time.fromisoformat(parts[1].strip())
    if start >= end:
        raise ValueError(f"Range start must be before end: {value!r}")
    return start, end


def intervals_overlap(a_start: int, a_end: int, b_start: int, b_end: int) -> bool:
    """Half-open overlap test: intervals that only touch do not overlap."""
    return a_start < b_end and b_start < a_end


def window_covers(window: AvailabilityWindow, start_minute: int, end_minute: int) -> bool:
    return (
        time_to_minutes(window.start_time) <= start_minute
        and end_minute <= time_to_minutes(window.end_time)
    )


def slots_for_window(
    window: AvailabilityWindow,
    duration_minutes: int,
    step_minutes: int = DEFAULT_STEP_MINUTES,
) -> list[time]:
    """
    Candidate start times inside a window, every step_minutes from the window start,
    keeping only starts whose full duration still ends inside the window.
    A window shorter than the duration yields no candidates.
    """
    if duration_minutes <= 0:
        raise ValueError(f"duration_minutes must be > 0, got {duration_minutes}")
    if step_minutes <= 0:
        raise ValueError(f"step_minutes must be > 0, got {step_minutes}")

    start = time_to_minutes(window.start_time)
    end = time_to_minutes(window.end_time)

    candidates: list[time] = []
    current = start
    while current + duration_minutes <= end:
        candidates.append(minutes_to_time(current))
        current += step_minutes
    return candidates
