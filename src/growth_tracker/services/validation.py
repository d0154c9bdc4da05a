"""Input validation shared by the ledger and report services."""

import math
from datetime import UTC, date, datetime

from growth_tracker.domain.results import InvalidInputError


def parse_timestamp(value: object, field_name: str = "date") -> datetime:
    """Parse a datetime, date or ISO-8601 string into an aware UTC timestamp."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError as exc:
            raise InvalidInputError(f"Invalid {field_name} format: '{value}'") from exc
    else:
        raise InvalidInputError(f"{field_name} is required and cannot be empty.")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def require_identifier(value: object, name: str) -> str:
    """Return a non-blank identifier or raise InvalidInput."""
    if not isinstance(value, str) or not value.strip():
        raise InvalidInputError(f"{name} identifier is required.")
    return value


def validate_weight(weight: object) -> float:
    """Return the weight as a float if it is a positive finite number."""
    if isinstance(weight, bool) or not isinstance(weight, int | float):
        raise InvalidInputError(f"Weight must be a number, got {weight!r}.")
    value = float(weight)
    if not math.isfinite(value) or value <= 0:
        raise InvalidInputError(f"Weight must be a positive number, got {weight!r}.")
    return value
