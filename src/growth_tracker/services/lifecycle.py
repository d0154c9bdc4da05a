"""Keeps reports consistent when animals are deleted."""

import logging
from dataclasses import dataclass

from growth_tracker.domain.reports import CascadeOutcome
from growth_tracker.services.reports import ReportRepository

logger = logging.getLogger(__name__)


@dataclass
class AnimalLifecycleBridge:
    """Cascades animal deletion into the owner's reports."""

    reports: ReportRepository

    def on_animal_deleted(
        self, owner_id: str, animal_id: str
    ) -> CascadeOutcome | None:
        """Delete the animal, drop it from every report and delete emptied reports.

        The animal row, its report entries and the emptied reports go in one
        transaction, so a concurrent merge either lands before the deletion and
        is swept with it, or finds the animal gone. Returns None if the animal
        does not exist.
        """
        outcome = self.reports.delete_animal_cascade(owner_id, animal_id)
        if outcome is None:
            return None
        if outcome.updated_reports or outcome.deleted_reports:
            logger.info(
                "Animal %s removed from reports %s; deleted empty reports %s",
                animal_id,
                outcome.updated_reports,
                outcome.deleted_reports,
            )
        return outcome
