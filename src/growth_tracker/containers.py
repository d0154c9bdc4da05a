"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from growth_tracker.adapters.openai_text_client import OpenAITextClient
from growth_tracker.adapters.supabase_animal_repository import (
    SupabaseAnimalRepository,
)
from growth_tracker.adapters.supabase_report_repository import (
    SupabaseReportRepository,
)
from growth_tracker.config import Settings
from growth_tracker.services.actions import GrowthTrackerActions
from growth_tracker.services.classifier import ClassifierService
from growth_tracker.services.ledger import WeightLedgerService
from growth_tracker.services.lifecycle import AnimalLifecycleBridge
from growth_tracker.services.reports import ReportService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    ledger_service: WeightLedgerService
    report_service: ReportService
    classifier_service: ClassifierService
    actions: GrowthTrackerActions
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    animal_repository = SupabaseAnimalRepository(supabase_client)
    report_repository = SupabaseReportRepository(supabase_client)
    lifecycle = AnimalLifecycleBridge(report_repository)
    ledger_service = WeightLedgerService(animal_repository, lifecycle)
    report_service = ReportService(report_repository, animals=animal_repository)
    text_client = OpenAITextClient.create(
        api_key=resolved_settings.openai_api_key,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
        timeout_seconds=resolved_settings.classifier_timeout_seconds,
    )
    classifier_service = ClassifierService(
        client=text_client,
        repository=report_repository,
        timeout_seconds=resolved_settings.classifier_timeout_seconds,
    )
    actions = GrowthTrackerActions(
        ledger=ledger_service,
        reports=report_service,
        classifier=classifier_service,
    )

    async def close_resources() -> None:
        await text_client.close()

    return AppContainer(
        settings=resolved_settings,
        ledger_service=ledger_service,
        report_service=report_service,
        classifier_service=classifier_service,
        actions=actions,
        close_resources=close_resources,
    )
