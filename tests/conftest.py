"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field, replace
from datetime import datetime

import pytest

from growth_tracker.config import Settings
from growth_tracker.containers import AppContainer
from growth_tracker.domain.animals import AnimalRecord, WeightObservation
from growth_tracker.domain.reports import (
    AnimalReportEntry,
    CascadeOutcome,
    ReportRecord,
)
from growth_tracker.domain.results import ConflictError, NotFoundError
from growth_tracker.services.actions import GrowthTrackerActions
from growth_tracker.services.classifier import ClassifierService, TextGenerationClient
from growth_tracker.services.ledger import AnimalRepository, WeightLedgerService
from growth_tracker.services.lifecycle import AnimalLifecycleBridge
from growth_tracker.services.reports import ReportRepository, ReportService

VALID_SUMMARY = (
    '{"highPerformers": ["A-1"], "lowPerformers": [], "concerningTrends": [], '
    '"averagePerformers": ["A-2"], "potentialRecordErrors": [], '
    '"insufficientData": [], "insights": "Steady gains across the group."}'
)


@dataclass
class InMemoryAnimalRepository(AnimalRepository):
    """In-memory animal repository for tests."""

    animals: dict[tuple[str, str], list[WeightObservation]] = field(
        default_factory=dict
    )

    def get_animal(self, owner_id: str, animal_id: str) -> AnimalRecord | None:
        observations = self.animals.get((owner_id, animal_id))
        if observations is None:
            return None
        return AnimalRecord(
            owner_id=owner_id,
            animal_id=animal_id,
            weight_observations=list(observations),
        )

    def append_observation(
        self, owner_id: str, animal_id: str, observation: WeightObservation
    ) -> None:
        self.animals.setdefault((owner_id, animal_id), []).append(observation)

    def remove_observations(
        self, owner_id: str, animal_id: str, observed_at: datetime
    ) -> int:
        observations = self.animals.get((owner_id, animal_id), [])
        kept = [item for item in observations if item.date != observed_at]
        removed = len(observations) - len(kept)
        if (owner_id, animal_id) in self.animals:
            self.animals[(owner_id, animal_id)] = kept
        return removed

    def list_animal_ids(self, owner_id: str) -> list[str]:
        return sorted(animal for owner, animal in self.animals if owner == owner_id)


@dataclass
class InMemoryReportRepository(ReportRepository):
    """In-memory report repository for tests."""

    reports: dict[tuple[str, str], ReportRecord] = field(default_factory=dict)
    animals: InMemoryAnimalRepository = field(default_factory=InMemoryAnimalRepository)

    def get_report(self, owner_id: str, report_name: str) -> ReportRecord | None:
        return self.reports.get((owner_id, report_name))

    def list_reports(self, owner_id: str) -> list[ReportRecord]:
        return [report for (owner, _), report in self.reports.items() if owner == owner_id]

    def upsert_entry(
        self,
        owner_id: str,
        report_name: str,
        entry: AnimalReportEntry,
        generated_at: datetime,
    ) -> ReportRecord:
        if (owner_id, entry.animal_id) not in self.animals.animals:
            raise NotFoundError(f"Animal '{entry.animal_id}' not found.")
        existing = self.reports.get((owner_id, report_name))
        results = list(existing.results) if existing else []
        for index, current in enumerate(results):
            if current.animal_id == entry.animal_id:
                results[index] = entry
                break
        else:
            results.append(entry)
        report = ReportRecord(
            owner_id=owner_id,
            report_name=report_name,
            date_generated=generated_at,
            results=results,
            ai_generated_summary="",
        )
        self.reports[(owner_id, report_name)] = report
        return report

    def rename_report(self, owner_id: str, old_name: str, new_name: str) -> bool:
        if (owner_id, old_name) not in self.reports:
            return False
        if (owner_id, new_name) in self.reports:
            raise ConflictError(f"Report '{new_name}' already exists.")
        report = self.reports.pop((owner_id, old_name))
        self.reports[(owner_id, new_name)] = replace(report, report_name=new_name)
        return True

    def delete_report(self, owner_id: str, report_name: str) -> bool:
        return self.reports.pop((owner_id, report_name), None) is not None

    def set_summary(self, owner_id: str, report_name: str, summary: str) -> bool:
        report = self.reports.get((owner_id, report_name))
        if report is None:
            return False
        self.reports[(owner_id, report_name)] = replace(
            report, ai_generated_summary=summary
        )
        return True

    def delete_animal_cascade(
        self, owner_id: str, animal_id: str
    ) -> CascadeOutcome | None:
        if self.animals.animals.pop((owner_id, animal_id), None) is None:
            return None
        updated, deleted = [], []
        for key, report in list(self.reports.items()):
            if key[0] != owner_id or report.entry_for(animal_id) is None:
                continue
            results = [e for e in report.results if e.animal_id != animal_id]
            if results:
                self.reports[key] = replace(report, results=results)
                updated.append(report.report_name)
            else:
                del self.reports[key]
                deleted.append(report.report_name)
        return CascadeOutcome(updated_reports=updated, deleted_reports=deleted)


@dataclass
class FakeTextClient(TextGenerationClient):
    """Fake text generation client that records prompts."""

    response: str = VALID_SUMMARY
    prompts: list[str] = field(default_factory=list)
    delay_seconds: float = 0.0
    error: Exception | None = None

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.delay_seconds:
            await asyncio.sleep(self.delay_seconds)
        if self.error is not None:
            raise self.error
        return self.response


@dataclass
class Services:
    """Service graph wired against in-memory repositories."""

    animals: InMemoryAnimalRepository
    reports: InMemoryReportRepository
    text_client: FakeTextClient
    ledger: WeightLedgerService
    report_service: ReportService
    classifier: ClassifierService
    actions: GrowthTrackerActions


def build_services(
    animals: InMemoryAnimalRepository | None = None,
    reports: InMemoryReportRepository | None = None,
    text_client: FakeTextClient | None = None,
    timeout_seconds: float = 5.0,
) -> Services:
    animals = animals or InMemoryAnimalRepository()
    reports = reports or InMemoryReportRepository()
    reports.animals = animals
    text_client = text_client or FakeTextClient()
    ledger = WeightLedgerService(animals, AnimalLifecycleBridge(reports))
    report_service = ReportService(reports, animals=animals)
    classifier = ClassifierService(
        client=text_client, repository=reports, timeout_seconds=timeout_seconds
    )
    return Services(
        animals=animals,
        reports=reports,
        text_client=text_client,
        ledger=ledger,
        report_service=report_service,
        classifier=classifier,
        actions=GrowthTrackerActions(
            ledger=ledger, reports=report_service, classifier=classifier
        ),
    )


@pytest.fixture
def services() -> Services:
    return build_services()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        openai_api_key="openai-key",
    )


@pytest.fixture
def container(settings: Settings, services: Services) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        ledger_service=services.ledger,
        report_service=services.report_service,
        classifier_service=services.classifier,
        actions=services.actions,
        close_resources=close_resources,
    )
