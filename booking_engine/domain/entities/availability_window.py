from __future__ import annotations

from dataclasses import dataclass
from datetime import time


@dataclass(frozen=True)
class AvailabilityWindow:
    provider_id: str
    day_of_week: int  # 0 = Monday ... 6 = Sunday, same as date.weekday()
    start_time: time
    end_time: time
    is_active: bool = True
    id: str | None = None

    def __post_init__(self) -> None:
        if not 0 <= self.day_of_week <= 6:
            raise ValueError(f"day_of_week must be between 0 and 6, got {self.day_of_week}")
        if self.start_time >= self.end_time:
            raise ValueError(
                f"Window start {self.start_time:%H:%M} must be before end {self.end_time:%H:%M}"
            )

    def overlaps(self, other: AvailabilityWindow) -> bool:
        if self.provider_id != other.provider_id or self.day_of_week != other.day_of_week:
            return False
        return self.start_time < other.end_time and other.start_time < self.end_time
