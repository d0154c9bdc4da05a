"""Domain models for growth reports."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class RecordedWeight:
    """Weight reading as captured in a report."""

    date: datetime
    weight: float


@dataclass(frozen=True)
class AnimalReportEntry:
    """Per-animal result row of a report."""

    animal_id: str
    recorded_weights: list[RecordedWeight]
    average_daily_gain: float | None

    def to_document(self) -> dict[str, object]:
        return {
            "animalId": self.animal_id,
            "recordedWeights": [
                {"date": item.date.isoformat(), "weight": item.weight}
                for item in self.recorded_weights
            ],
            "averageDailyGain": self.average_daily_gain,
        }


@dataclass(frozen=True)
class ReportRecord:
    """Named, owner-scoped aggregate of per-animal growth entries."""

    owner_id: str
    report_name: str
    date_generated: datetime
    results: list[AnimalReportEntry] = field(default_factory=list)
    ai_generated_summary: str = ""

    @property
    def target_animals(self) -> set[str]:
        """Animals targeted by the report, always the set of result animals."""
        return {entry.animal_id for entry in self.results}

    def entry_for(self, animal_id: str) -> AnimalReportEntry | None:
        for entry in self.results:
            if entry.animal_id == animal_id:
                return entry
        return None

    def to_document(self) -> dict[str, object]:
        """Return the persisted report shape read by other collaborators."""
        return {
            "ownerId": self.owner_id,
            "reportName": self.report_name,
            "dateGenerated": self.date_generated.isoformat(),
            "targetAnimals": sorted(self.target_animals),
            "results": [entry.to_document() for entry in self.results],
            "aiGeneratedSummary": self.ai_generated_summary,
        }


@dataclass(frozen=True)
class CascadeOutcome:
    """Reports touched by an animal deletion sweep."""

    updated_reports: list[str]
    deleted_reports: list[str]
