from dataclasses import dataclass


@dataclass(frozen=True)
class Provider:
    id: str
    display_name: str
    rating: float = 0.0  # average review rating, 0-5
    is_active: bool = True
