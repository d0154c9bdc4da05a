"""Request models for the growth tracker API."""

from pydantic import BaseModel


class RecordWeightRequest(BaseModel):
    date: str | None = None
    weight: float | None = None
    notes: str = ""


class GenerateReportRequest(BaseModel):
    """Merge one animal's growth over a range into a named report."""

    animal_id: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    report_name: str | None = None


class RenameReportRequest(BaseModel):
    new_name: str | None = None
