"""Action boundary returning tagged results instead of raising."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

from growth_tracker.domain.animals import WeightObservation
from growth_tracker.domain.reports import ReportRecord
from growth_tracker.domain.results import (
    ActionError,
    Err,
    GrowthTrackerError,
    Ok,
    Result,
)
from growth_tracker.services.classifier import ClassifierService
from growth_tracker.services.ledger import WeightLedgerService
from growth_tracker.services.reports import ReportService

T = TypeVar("T")

logger = logging.getLogger(__name__)


def _run(action: str, call: Callable[[], T]) -> Result[T]:
    try:
        return Ok(call())
    except GrowthTrackerError as exc:
        logger.info("%s failed with %s: %s", action, exc.kind, exc.message)
        return Err(ActionError.from_exception(exc))
    except Exception:
        logger.exception("Unexpected failure in %s", action)
        raise


async def _run_async(action: str, call: Callable[[], Awaitable[T]]) -> Result[T]:
    try:
        return Ok(await call())
    except GrowthTrackerError as exc:
        logger.info("%s failed with %s: %s", action, exc.kind, exc.message)
        return Err(ActionError.from_exception(exc))
    except Exception:
        logger.exception("Unexpected failure in %s", action)
        raise


@dataclass
class GrowthTrackerActions:
    """Entry points for callers that branch on error kinds."""

    ledger: WeightLedgerService
    reports: ReportService
    classifier: ClassifierService

    def record_observation(  # noqa: PLR0913
        self,
        owner_id: str,
        animal_id: str,
        date: object,
        weight: object,
        notes: str | None = "",
    ) -> Result[WeightObservation]:
        return _run(
            "record_observation",
            lambda: self.ledger.record_observation(
                owner_id, animal_id, date, weight, notes
            ),
        )

    def remove_observation(
        self, owner_id: str, animal_id: str, date: object
    ) -> Result[int]:
        return _run(
            "remove_observation",
            lambda: self.ledger.remove_observation(owner_id, animal_id, date),
        )

    def delete_animal(self, owner_id: str, animal_id: str) -> Result[None]:
        return _run(
            "delete_animal", lambda: self.ledger.delete_animal(owner_id, animal_id)
        )

    def get_weights(
        self, owner_id: str, animal_id: str
    ) -> Result[list[WeightObservation]]:
        return _run(
            "get_weights", lambda: self.ledger.get_weights(owner_id, animal_id)
        )

    def list_animals(self, owner_id: str) -> Result[list[str]]:
        return _run("list_animals", lambda: self.ledger.list_animals(owner_id))

    def generate_report(  # noqa: PLR0913
        self,
        owner_id: str,
        animal_id: str,
        range_start: object,
        range_end: object,
        report_name: str,
    ) -> Result[ReportRecord]:
        return _run(
            "generate_report",
            lambda: self.reports.generate_report(
                owner_id, animal_id, range_start, range_end, report_name
            ),
        )

    def rename_report(
        self, owner_id: str, old_name: str, new_name: str
    ) -> Result[None]:
        return _run(
            "rename_report",
            lambda: self.reports.rename_report(owner_id, old_name, new_name),
        )

    def delete_report(self, owner_id: str, report_name: str) -> Result[None]:
        return _run(
            "delete_report", lambda: self.reports.delete_report(owner_id, report_name)
        )

    def get_report(self, owner_id: str, report_name: str) -> Result[ReportRecord]:
        return _run(
            "get_report", lambda: self.reports.get_report(owner_id, report_name)
        )

    def list_reports(self, owner_id: str) -> Result[list[ReportRecord]]:
        return _run("list_reports", lambda: self.reports.list_reports(owner_id))

    async def classify(self, owner_id: str, report_name: str) -> Result[str]:
        return await _run_async(
            "classify", lambda: self.classifier.classify(owner_id, report_name)
        )

    async def get_or_create_summary(
        self, owner_id: str, report_name: str
    ) -> Result[str]:
        return await _run_async(
            "get_or_create_summary",
            lambda: self.classifier.get_or_create_summary(owner_id, report_name),
        )

    def get_summary(self, owner_id: str, report_name: str) -> Result[str]:
        return _run(
            "get_summary", lambda: self.classifier.get_summary(owner_id, report_name)
        )
