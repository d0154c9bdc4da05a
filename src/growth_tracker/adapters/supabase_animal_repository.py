"""Supabase-backed repository for animals and weight observations."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from growth_tracker.domain.animals import AnimalRecord, WeightObservation
from growth_tracker.services.ledger import AnimalRepository


@dataclass
class SupabaseAnimalRepository(AnimalRepository):
    """Supabase implementation for the weight ledger."""

    client: Client

    def get_animal(self, owner_id: str, animal_id: str) -> AnimalRecord | None:
        """Return the animal with its observations, if present."""
        response = (
            self.client.table("growth_animals")
            .select(
                "id, owner_id, animal_identifier, "
                "growth_weight_observations(observed_at, weight, notes)"
            )
            .eq("owner_id", owner_id)
            .eq("animal_identifier", animal_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_animal(response.data[0])

    def append_observation(
        self, owner_id: str, animal_id: str, observation: WeightObservation
    ) -> None:
        """Upsert the animal by owner and identifier, then insert the reading."""
        response = (
            self.client.table("growth_animals")
            .upsert(
                {"owner_id": owner_id, "animal_identifier": animal_id},
                on_conflict="owner_id,animal_identifier",
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to upsert animal")
        self.client.table("growth_weight_observations").insert(
            {
                "animal_id": response.data[0]["id"],
                "observed_at": observation.date.isoformat(),
                "weight": observation.weight,
                "notes": observation.notes,
            }
        ).execute()

    def remove_observations(
        self, owner_id: str, animal_id: str, observed_at: datetime
    ) -> int:
        """Delete every observation at the exact timestamp."""
        row_id = self._animal_row_id(owner_id, animal_id)
        if row_id is None:
            return 0
        response = (
            self.client.table("growth_weight_observations")
            .delete()
            .eq("animal_id", row_id)
            .eq("observed_at", observed_at.isoformat())
            .execute()
        )
        return len(response.data or [])

    def list_animal_ids(self, owner_id: str) -> list[str]:
        """Return all animal identifiers for an owner."""
        response = (
            self.client.table("growth_animals")
            .select("animal_identifier")
            .eq("owner_id", owner_id)
            .order("animal_identifier", desc=False)
            .execute()
        )
        return [str(row["animal_identifier"]) for row in response.data or []]

    def _animal_row_id(self, owner_id: str, animal_id: str) -> str | None:
        response = (
            self.client.table("growth_animals")
            .select("id")
            .eq("owner_id", owner_id)
            .eq("animal_identifier", animal_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return str(response.data[0]["id"])


def _parse_animal(row: dict[str, object]) -> AnimalRecord:
    observations = [
        WeightObservation(
            date=datetime.fromisoformat(str(item["observed_at"])),
            weight=float(item.get("weight", 0.0)),
            notes=str(item.get("notes") or ""),
        )
        for item in row.get("growth_weight_observations") or []
    ]
    return AnimalRecord(
        owner_id=str(row["owner_id"]),
        animal_id=str(row["animal_identifier"]),
        weight_observations=observations,
    )
