"""Named, owner-scoped growth reports with per-animal merge semantics."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol

from growth_tracker.domain.animals import AnimalRecord
from growth_tracker.domain.reports import (
    AnimalReportEntry,
    CascadeOutcome,
    ReportRecord,
)
from growth_tracker.domain.results import (
    ConflictError,
    InvalidInputError,
    NotFoundError,
)
from growth_tracker.services.growth import compute_growth
from growth_tracker.services.validation import parse_timestamp, require_identifier

logger = logging.getLogger(__name__)


class AnimalDirectory(Protocol):
    """Read access to the animals a report can target."""

    def get_animal(self, owner_id: str, animal_id: str) -> AnimalRecord | None:
        """Return the animal with its observations, if present."""


class ReportRepository(Protocol):
    """Persistence interface for growth reports.

    Every mutation is a single conditional update keyed by the owner and
    report name (or owner and animal), never a read-then-overwrite of the
    whole report.
    """

    def get_report(self, owner_id: str, report_name: str) -> ReportRecord | None:
        """Return a report by name, if present."""

    def list_reports(self, owner_id: str) -> list[ReportRecord]:
        """Return all reports for an owner."""

    def upsert_entry(
        self,
        owner_id: str,
        report_name: str,
        entry: AnimalReportEntry,
        generated_at: datetime,
    ) -> ReportRecord:
        """Create the report if absent, then insert or replace the animal's entry.

        Runs as one transaction that also checks the animal still exists, and
        raises NotFoundError otherwise. Stamps ``date_generated`` and clears
        the cached AI summary.
        """

    def rename_report(self, owner_id: str, old_name: str, new_name: str) -> bool:
        """Rename a report; return False if it does not exist.

        Raises ConflictError when ``new_name`` is already taken.
        """

    def delete_report(self, owner_id: str, report_name: str) -> bool:
        """Delete a report and its entries; return whether it existed."""

    def set_summary(self, owner_id: str, report_name: str, summary: str) -> bool:
        """Store the AI summary only; return whether the report existed."""

    def delete_animal_cascade(
        self, owner_id: str, animal_id: str
    ) -> CascadeOutcome | None:
        """Delete an animal with its report entries and the reports left empty.

        Runs as one transaction. Returns None if the animal does not exist.
        """


@dataclass
class ReportService:
    """Application service for generating and maintaining growth reports."""

    repository: ReportRepository
    animals: AnimalDirectory

    def generate_report(  # noqa: PLR0913
        self,
        owner_id: str,
        animal_id: str,
        range_start: object,
        range_end: object,
        report_name: str,
    ) -> ReportRecord:
        """Compute an animal's growth over a range and merge it into a report."""
        require_identifier(owner_id, "owner")
        require_identifier(animal_id, "animal")
        report_name = _require_report_name(report_name)
        start = parse_timestamp(range_start, "start date")
        end = parse_timestamp(range_end, "end date")
        if start > end:
            raise InvalidInputError(
                f"Start date {start.isoformat()} is after end date {end.isoformat()}."
            )

        animal = self.animals.get_animal(owner_id, animal_id)
        if animal is None:
            raise NotFoundError(
                f"Animal '{animal_id}' not found for owner '{owner_id}'."
            )

        growth = compute_growth(animal.weight_observations, start, end)
        entry = AnimalReportEntry(
            animal_id=animal_id,
            recorded_weights=growth.recorded_weights,
            average_daily_gain=growth.average_daily_gain,
        )
        report = self.repository.upsert_entry(
            owner_id, report_name, entry, generated_at=datetime.now(tz=UTC)
        )
        logger.info(
            "Merged animal %s into report '%s' (%d animals)",
            animal_id,
            report_name,
            len(report.results),
        )
        return report

    def rename_report(self, owner_id: str, old_name: str, new_name: str) -> None:
        """Change a report's name, keeping everything else."""
        require_identifier(owner_id, "owner")
        old_name = _require_report_name(old_name)
        new_name = _require_report_name(new_name)
        if old_name == new_name:
            raise InvalidInputError("New report name must differ from the old name.")
        if self.repository.get_report(owner_id, old_name) is None:
            raise NotFoundError(_report_missing(owner_id, old_name))
        if self.repository.get_report(owner_id, new_name) is not None:
            raise ConflictError(
                f"Report '{new_name}' already exists for owner '{owner_id}'."
            )
        if not self.repository.rename_report(owner_id, old_name, new_name):
            raise NotFoundError(_report_missing(owner_id, old_name))

    def delete_report(self, owner_id: str, report_name: str) -> None:
        """Delete a report unconditionally."""
        require_identifier(owner_id, "owner")
        if not self.repository.delete_report(owner_id, report_name):
            raise NotFoundError(_report_missing(owner_id, report_name))

    def get_report(self, owner_id: str, report_name: str) -> ReportRecord:
        """Return a report by name."""
        require_identifier(owner_id, "owner")
        report = self.repository.get_report(owner_id, report_name)
        if report is None:
            raise NotFoundError(_report_missing(owner_id, report_name))
        return report

    def list_reports(self, owner_id: str) -> list[ReportRecord]:
        """Return the owner's reports ordered by name."""
        require_identifier(owner_id, "owner")
        reports = self.repository.list_reports(owner_id)
        return sorted(reports, key=lambda report: report.report_name)


def _require_report_name(report_name: object) -> str:
    if not isinstance(report_name, str) or not report_name.strip():
        raise InvalidInputError("Report name is required.")
    return report_name


def _report_missing(owner_id: str, report_name: str) -> str:
    return f"Report with name '{report_name}' not found for owner '{owner_id}'."
