"""Supabase-backed repository for growth reports."""

from dataclasses import dataclass
from datetime import datetime

from postgrest.exceptions import APIError
from supabase import Client

from growth_tracker.domain.reports import (
    AnimalReportEntry,
    CascadeOutcome,
    RecordedWeight,
    ReportRecord,
)
from growth_tracker.domain.results import ConflictError, NotFoundError
from growth_tracker.services.reports import ReportRepository

_UNIQUE_VIOLATION = "23505"

_REPORT_COLUMNS = (
    "id, owner_id, name, date_generated, ai_summary, "
    "growth_report_entries(animal_identifier, recorded_weights, "
    "average_daily_gain, added_at)"
)


@dataclass
class SupabaseReportRepository(ReportRepository):
    """Supabase implementation for growth reports and their entries."""

    client: Client

    def get_report(self, owner_id: str, report_name: str) -> ReportRecord | None:
        """Return a report with its entries, if present."""
        response = (
            self.client.table("growth_reports")
            .select(_REPORT_COLUMNS)
            .eq("owner_id", owner_id)
            .eq("name", report_name)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_report(response.data[0])

    def list_reports(self, owner_id: str) -> list[ReportRecord]:
        """Return all reports for an owner."""
        response = (
            self.client.table("growth_reports")
            .select(_REPORT_COLUMNS)
            .eq("owner_id", owner_id)
            .order("name", desc=False)
            .execute()
        )
        return [_parse_report(row) for row in response.data or []]

    def upsert_entry(
        self,
        owner_id: str,
        report_name: str,
        entry: AnimalReportEntry,
        generated_at: datetime,
    ) -> ReportRecord:
        """Merge the entry through a single database function call."""
        response = self.client.rpc(
            "merge_growth_report_entry",
            {
                "p_owner_id": owner_id,
                "p_name": report_name,
                "p_animal_identifier": entry.animal_id,
                "p_recorded_weights": [
                    {"date": item.date.isoformat(), "weight": item.weight}
                    for item in entry.recorded_weights
                ],
                "p_average_daily_gain": entry.average_daily_gain,
                "p_generated_at": generated_at.isoformat(),
            },
        ).execute()
        if not response.data:
            raise NotFoundError(
                f"Animal '{entry.animal_id}' not found for owner '{owner_id}'."
            )
        report = self.get_report(owner_id, report_name)
        if report is None:
            raise RuntimeError("Report disappeared after upsert")
        return report

    def rename_report(self, owner_id: str, old_name: str, new_name: str) -> bool:
        """Rename a report, mapping unique violations to conflicts."""
        try:
            response = (
                self.client.table("growth_reports")
                .update({"name": new_name})
                .eq("owner_id", owner_id)
                .eq("name", old_name)
                .execute()
            )
        except APIError as exc:
            if exc.code == _UNIQUE_VIOLATION:
                raise ConflictError(
                    f"Report '{new_name}' already exists for owner '{owner_id}'."
                ) from exc
            raise
        return bool(response.data)

    def delete_report(self, owner_id: str, report_name: str) -> bool:
        """Delete a report; entries are removed by the foreign key."""
        response = (
            self.client.table("growth_reports")
            .delete()
            .eq("owner_id", owner_id)
            .eq("name", report_name)
            .execute()
        )
        return bool(response.data)

    def set_summary(self, owner_id: str, report_name: str, summary: str) -> bool:
        """Update only the AI summary column."""
        response = (
            self.client.table("growth_reports")
            .update({"ai_summary": summary})
            .eq("owner_id", owner_id)
            .eq("name", report_name)
            .execute()
        )
        return bool(response.data)

    def delete_animal_cascade(
        self, owner_id: str, animal_id: str
    ) -> CascadeOutcome | None:
        """Delete the animal and sweep its reports in one database function call."""
        response = self.client.rpc(
            "delete_growth_animal",
            {"p_owner_id": owner_id, "p_animal_identifier": animal_id},
        ).execute()
        if not response.data:
            return None
        row = response.data[0]
        return CascadeOutcome(
            updated_reports=[str(name) for name in row.get("updated_reports") or []],
            deleted_reports=[str(name) for name in row.get("deleted_reports") or []],
        )


def _parse_report(row: dict[str, object]) -> ReportRecord:
    entry_rows = sorted(
        row.get("growth_report_entries") or [],
        key=lambda item: str(item.get("added_at") or ""),
    )
    return ReportRecord(
        owner_id=str(row["owner_id"]),
        report_name=str(row["name"]),
        date_generated=datetime.fromisoformat(str(row["date_generated"])),
        results=[_parse_entry(item) for item in entry_rows],
        ai_generated_summary=str(row.get("ai_summary") or ""),
    )


def _parse_entry(row: dict[str, object]) -> AnimalReportEntry:
    gain = row.get("average_daily_gain")
    return AnimalReportEntry(
        animal_id=str(row["animal_identifier"]),
        recorded_weights=[
            RecordedWeight(
                date=datetime.fromisoformat(str(item["date"])),
                weight=float(item["weight"]),
            )
            for item in row.get("recorded_weights") or []
        ],
        average_daily_gain=float(gain) if gain is not None else None,
    )
