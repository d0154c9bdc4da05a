"""AI-assisted performance classification of report animals."""

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError

from growth_tracker.domain.classification import (
    ClassificationSummary,
    Rejected,
    Validated,
    ValidationOutcome,
)
from growth_tracker.domain.reports import AnimalReportEntry, ReportRecord
from growth_tracker.domain.results import (
    InvalidUpstreamResponseError,
    NotFoundError,
    UpstreamFailureError,
)
from growth_tracker.services.reports import ReportRepository

logger = logging.getLogger(__name__)

INSTRUCTIONS = """You are an expert livestock analyst. Given the following growth report, respond ONLY with valid JSON in this exact format:
{
"highPerformers": [],
"lowPerformers": [],
"concerningTrends": [],
"averagePerformers": [],
"potentialRecordErrors": [],
"insufficientData": [],
"insights": "A few short paragraphs (2-3) summarizing the most important findings, possible causes for low performance or concerning trends, and practical management or intervention strategies. Do not focus on average performers, but mention if the overall performance of the group is particularly good or bad."
}
Do not include any explanation or text before or after the JSON. Every array must contain animal IDs as strings. If a category is empty, return an empty array.

Every animal in the report must appear in at least one category. Only place an animal in 'averagePerformers' if it is in no other category. Use 'insufficientData' only for animals with zero or one weight record in the range.

Be highly suspicious of questionable records and liberal about flagging them: include the animal in 'potentialRecordErrors' and mention the issue in 'insights' if anything seems odd, for example:
- Negative or impossible values (negative weights or gains)
- Implausibly high or low weights or gains for the species or age
- Obvious typos (an extra zero, a misplaced decimal, swapped digits)
- Outliers that break an otherwise consistent trend
If you mention or suspect a record error for an animal, its ID must appear in 'potentialRecordErrors'.
"""


class TextGenerationClient(Protocol):
    """Interface for the remote text-generation capability."""

    async def generate(self, prompt: str) -> str:
        """Return the raw generated text for a prompt."""


@dataclass
class ClassifierService:
    """Service that prompts the model and validates its classification."""

    client: TextGenerationClient
    repository: ReportRepository
    timeout_seconds: float = 60.0

    async def classify(self, owner_id: str, report_name: str) -> str:
        """Classify a report's animals, overwriting any stored summary."""
        report = self._load(owner_id, report_name)
        return await self._classify_report(report)

    async def get_or_create_summary(self, owner_id: str, report_name: str) -> str:
        """Return the stored summary, classifying only when none exists."""
        report = self._load(owner_id, report_name)
        if report.ai_generated_summary:
            return report.ai_generated_summary
        return await self._classify_report(report)

    def get_summary(self, owner_id: str, report_name: str) -> str:
        """Return the stored summary without contacting the model."""
        return self._load(owner_id, report_name).ai_generated_summary

    async def _classify_report(self, report: ReportRecord) -> str:
        prompt = build_prompt(report)
        try:
            raw = await asyncio.wait_for(
                self.client.generate(prompt), timeout=self.timeout_seconds
            )
        except TimeoutError as exc:
            logger.warning(
                "Classification timed out for report '%s'", report.report_name
            )
            raise UpstreamFailureError(
                f"Classification of report '{report.report_name}' timed out."
            ) from exc
        except Exception as exc:
            logger.exception(
                "Classification request failed for report '%s'", report.report_name
            )
            raise UpstreamFailureError(
                f"Failed to generate AI summary for report "
                f"'{report.report_name}': {exc}"
            ) from exc

        outcome = validate_response(raw)
        if isinstance(outcome, Rejected):
            logger.warning(
                "Rejected classification for report '%s': %s",
                report.report_name,
                outcome.reason,
            )
            raise InvalidUpstreamResponseError(
                f"Invalid classification response: {outcome.reason}"
            )

        if not self.repository.set_summary(
            report.owner_id, report.report_name, outcome.raw
        ):
            raise NotFoundError(_report_missing(report.owner_id, report.report_name))
        return outcome.raw

    def _load(self, owner_id: str, report_name: str) -> ReportRecord:
        report = self.repository.get_report(owner_id, report_name)
        if report is None:
            raise NotFoundError(_report_missing(owner_id, report_name))
        return report


def build_prompt(report: ReportRecord) -> str:
    """Build the full classification prompt for a report."""
    lines = [_format_entry(index, entry) for index, entry in enumerate(report.results, 1)]
    return (
        f"{INSTRUCTIONS}\n"
        "Here is the report data:\n"
        f"Report Name: {json.dumps(report.report_name)}\n"
        f"Generated Date: {report.date_generated.isoformat()}\n"
        f"Target Animals: {', '.join(json.dumps(a) for a in sorted(report.target_animals))}\n"
        "Report Entries:\n" + "\n".join(lines) + "\n"
    )


def _format_entry(index: int, entry: AnimalReportEntry) -> str:
    weights = ", ".join(
        f"{item.date.isoformat()} = {item.weight!r}"
        for item in entry.recorded_weights
    )
    if entry.average_daily_gain is None:
        gain = "not enough data"
    else:
        gain = f"{entry.average_daily_gain:.4f} per day"
    return (
        f"  {index}. Animal {json.dumps(entry.animal_id)}: "
        f"weights [{weights or 'none'}]; average daily gain: {gain}"
    )


def validate_response(raw: str) -> ValidationOutcome:
    """Strip code fences, parse JSON and check it against the summary schema."""
    text = strip_code_fences(raw)
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        return Rejected(reason=f"response is not valid JSON ({exc.msg})")
    if not isinstance(data, dict):
        return Rejected(reason="response is not a JSON object")
    try:
        summary = ClassificationSummary.model_validate(data)
    except ValidationError as exc:
        fields = sorted({str(error["loc"][0]) for error in exc.errors() if error["loc"]})
        return Rejected(reason=f"invalid or missing fields: {', '.join(fields)}")
    return Validated(summary=summary, raw=text)


def strip_code_fences(raw: str) -> str:
    """Remove surrounding markdown code fences from model output."""
    text = raw.strip()
    if text.startswith("```"):
        newline = text.find("\n")
        text = text[newline + 1 :] if newline != -1 else text[3:]
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


def _report_missing(owner_id: str, report_name: str) -> str:
    return f"Report with name '{report_name}' not found for owner '{owner_id}'."
