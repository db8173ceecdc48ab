"""
Turn raw model output into a validated Itinerary.

Nothing produced by the model is trusted until ``parse_itinerary`` returns.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from app.core.exceptions import ItineraryParseError, ItineraryValidationError
from app.core.schemas import Itinerary

logger = logging.getLogger(__name__)

REQUIRED_KEYS = ("summary", "totalEstimatedCost", "days", "packingTips", "generalTips")

_FENCE_RE = re.compile(r"```(?:json|JSON)?\s*([\s\S]*?)\s*```")


@dataclass
class ParsedItinerary:
    itinerary: Itinerary
    warnings: list[str] = field(default_factory=list)


def strip_code_fence(raw_text: str) -> str:
    """Return the body of the first markdown code block, or the text unchanged."""
    text = raw_text.strip()
    match = _FENCE_RE.search(text)
    if match:
        return match.group(1).strip()
    return text


def _load_json_object(raw_text: str) -> dict[str, Any]:
    text = strip_code_fence(raw_text)

    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        # Models sometimes wrap the object in a sentence; try the outermost braces
        start = text.find("{")
        end = text.rfind("}")
        if start == -1 or end <= start:
            raise ItineraryParseError()
        try:
            data = json.loads(text[start : end + 1])
        except json.JSONDecodeError:
            raise ItineraryParseError()

    if not isinstance(data, dict):
        raise ItineraryParseError(details={"reason": "Top-level JSON value is not an object"})
    return data


def _format_validation_errors(exc: ValidationError) -> list[str]:
    messages = []
    for error in exc.errors()[:10]:
        location = ".".join(str(part) for part in error.get("loc", ()))
        messages.append(f"{location}: {error.get('msg')}")
    return messages


def parse_itinerary(raw_text: str, expected_days: int | None = None) -> ParsedItinerary:
    """
    Parse and validate model output.

    Args:
        raw_text: Model response, optionally fenced in a markdown code block.
        expected_days: Day count requested in the prompt. A different count is
            reported as a warning rather than rejected.

    Returns:
        ParsedItinerary with the typed document and any warnings.

    Raises:
        ItineraryParseError: The text is not a JSON object.
        ItineraryValidationError: Required keys are missing, a field has the
            wrong shape, or day numbers are not exactly 1..N.
    """
    if not raw_text or not raw_text.strip():
        raise ItineraryParseError(details={"reason": "Empty response"})

    data = _load_json_object(raw_text)

    missing = [key for key in REQUIRED_KEYS if key not in data]
    if missing:
        raise ItineraryValidationError(
            f"AI response is missing required fields: {', '.join(missing)}",
            details={"missing_fields": missing},
        )
    if not isinstance(data["days"], list) or not data["days"]:
        raise ItineraryValidationError("AI response contains no days")

    try:
        itinerary = Itinerary.model_validate(data)
    except ValidationError as exc:
        raise ItineraryValidationError(
            "AI response does not match the itinerary format",
            details={"errors": _format_validation_errors(exc)},
        )

    day_numbers = [day.day_number for day in itinerary.days]
    if day_numbers != list(range(1, len(day_numbers) + 1)):
        raise ItineraryValidationError(
            "Day numbers must start at 1 and increase by 1",
            details={"day_numbers": day_numbers},
        )

    warnings = []
    if expected_days is not None and len(itinerary.days) != expected_days:
        message = f"Requested {expected_days} days but received {len(itinerary.days)}"
        logger.warning(f"[Parser] {message}")
        warnings.append(message)

    return ParsedItinerary(itinerary=itinerary, warnings=warnings)
