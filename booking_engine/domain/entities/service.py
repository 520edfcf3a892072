from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Service:
    id: str
    provider_id: str
    name: str
    duration_minutes: int
    category: str | None = None
    is_active: bool = True

    def __post_init__(self) -> None:
        if self.duration_minutes <= 0:
            raise ValueError(f"duration_minutes must be > 0, got {self.duration_minutes}")

    def is_equivalent_to(self, other: Service) -> bool:
        """Same offering from (possibly) another provider: matching category and name."""
        return (
            self.category == other.category
            and self.name.strip().lower() == other.name.strip().lower()
        )
