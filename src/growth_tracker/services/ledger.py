"""Per-animal weight ledger scoped by owner."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from growth_tracker.domain.animals import AnimalRecord, WeightObservation
from growth_tracker.domain.results import NotFoundError
from growth_tracker.services.lifecycle import AnimalLifecycleBridge
from growth_tracker.services.validation import (
    parse_timestamp,
    require_identifier,
    validate_weight,
)

logger = logging.getLogger(__name__)


class AnimalRepository(Protocol):
    """Persistence interface for animals and their weight observations."""

    def get_animal(self, owner_id: str, animal_id: str) -> AnimalRecord | None:
        """Return the animal with its observations, if present."""

    def append_observation(
        self, owner_id: str, animal_id: str, observation: WeightObservation
    ) -> None:
        """Create the animal if absent and append an observation."""

    def remove_observations(
        self, owner_id: str, animal_id: str, observed_at: datetime
    ) -> int:
        """Remove every observation at the exact timestamp and return the count."""

    def list_animal_ids(self, owner_id: str) -> list[str]:
        """Return identifiers of all animals with weight records for an owner."""


@dataclass
class WeightLedgerService:
    """Application service for recording and removing weight observations."""

    repository: AnimalRepository
    lifecycle: AnimalLifecycleBridge

    def record_observation(  # noqa: PLR0913
        self,
        owner_id: str,
        animal_id: str,
        date: object,
        weight: object,
        notes: str | None = "",
    ) -> WeightObservation:
        """Validate and append a weight observation, creating the animal if new."""
        require_identifier(owner_id, "owner")
        require_identifier(animal_id, "animal")
        observation = WeightObservation(
            date=parse_timestamp(date),
            weight=validate_weight(weight),
            notes=notes or "",
        )
        self.repository.append_observation(owner_id, animal_id, observation)
        return observation

    def remove_observation(self, owner_id: str, animal_id: str, date: object) -> int:
        """Remove all observations recorded at exactly ``date``."""
        require_identifier(owner_id, "owner")
        require_identifier(animal_id, "animal")
        observed_at = parse_timestamp(date)
        if self.repository.get_animal(owner_id, animal_id) is None:
            raise NotFoundError(_animal_missing(owner_id, animal_id))
        removed = self.repository.remove_observations(owner_id, animal_id, observed_at)
        if removed == 0:
            raise NotFoundError(
                f"No weight record found for animal '{animal_id}' "
                f"at {observed_at.isoformat()}."
            )
        return removed

    def delete_animal(self, owner_id: str, animal_id: str) -> None:
        """Delete an animal together with its report references.

        Deletion and report cleanup succeed or fail together.
        """
        require_identifier(owner_id, "owner")
        require_identifier(animal_id, "animal")
        if self.lifecycle.on_animal_deleted(owner_id, animal_id) is None:
            raise NotFoundError(_animal_missing(owner_id, animal_id))
        logger.info("Deleted animal %s for owner %s", animal_id, owner_id)

    def get_weights(self, owner_id: str, animal_id: str) -> list[WeightObservation]:
        """Return an animal's observations sorted by date."""
        require_identifier(owner_id, "owner")
        record = self.repository.get_animal(owner_id, animal_id)
        if record is None:
            raise NotFoundError(_animal_missing(owner_id, animal_id))
        return record.sorted_observations()

    def list_animals(self, owner_id: str) -> list[str]:
        """Return all animals with weight records for the owner."""
        require_identifier(owner_id, "owner")
        return self.repository.list_animal_ids(owner_id)

    def exists(self, owner_id: str, animal_id: str) -> bool:
        return self.repository.get_animal(owner_id, animal_id) is not None


def _animal_missing(owner_id: str, animal_id: str) -> str:
    return f"Animal '{animal_id}' not found for owner '{owner_id}'."
