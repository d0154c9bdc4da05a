"""Models for AI performance classification results."""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, StrictStr


class ClassificationSummary(BaseModel):
    """Structured classification of the animals in a report."""

    model_config = ConfigDict(strict=True)

    highPerformers: list[StrictStr]  # noqa: N815
    lowPerformers: list[StrictStr]  # noqa: N815
    concerningTrends: list[StrictStr]  # noqa: N815
    averagePerformers: list[StrictStr]  # noqa: N815
    potentialRecordErrors: list[StrictStr]  # noqa: N815
    insufficientData: list[StrictStr]  # noqa: N815
    insights: StrictStr


@dataclass(frozen=True)
class Validated:
    """Response that passed schema validation."""

    summary: ClassificationSummary
    raw: str


@dataclass(frozen=True)
class Rejected:
    """Response that failed schema validation."""

    reason: str


ValidationOutcome = Validated | Rejected
