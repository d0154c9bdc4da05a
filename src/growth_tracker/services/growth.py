"""Growth rate computation over dated weight observations."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

from growth_tracker.domain.animals import WeightObservation
from growth_tracker.domain.reports import RecordedWeight

SECONDS_PER_DAY = 86400


@dataclass(frozen=True)
class GrowthResult:
    """Weights within a range and their average daily gain."""

    recorded_weights: list[RecordedWeight]
    average_daily_gain: float | None


def compute_growth(
    observations: Iterable[WeightObservation],
    range_start: datetime,
    range_end: datetime,
) -> GrowthResult:
    """Compute the day-weighted average daily gain for a date range.

    Observations outside ``[range_start, range_end]`` are ignored. Each pair of
    consecutive readings contributes its own gain and duration, so irregular
    sampling intervals are weighted by how long they span. Same-timestamp pairs
    contribute nothing. Fewer than two readings yields no gain.
    """
    in_range = sorted(
        (item for item in observations if range_start <= item.date <= range_end),
        key=lambda item: item.date,
    )
    recorded = [RecordedWeight(date=item.date, weight=item.weight) for item in in_range]
    if len(recorded) < 2:  # noqa: PLR2004
        return GrowthResult(recorded_weights=recorded, average_daily_gain=None)

    total_gain = 0.0
    total_days = 0.0
    for previous, current in zip(recorded, recorded[1:], strict=False):
        days = (current.date - previous.date).total_seconds() / SECONDS_PER_DAY
        if days <= 0:
            continue
        total_gain += current.weight - previous.weight
        total_days += days

    average_daily_gain = total_gain / total_days if total_days > 0 else None
    return GrowthResult(recorded_weights=recorded, average_daily_gain=average_daily_gain)
