"""Domain models for animals and their weight observations."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class WeightObservation:
    """Single dated weight reading."""

    date: datetime
    weight: float
    notes: str = ""


@dataclass(frozen=True)
class AnimalRecord:
    """An owner's animal with its weight history."""

    owner_id: str
    animal_id: str
    weight_observations: list[WeightObservation] = field(default_factory=list)

    def sorted_observations(self) -> list[WeightObservation]:
        """Return observations ordered by date."""
        return sorted(self.weight_observations, key=lambda item: item.date)
