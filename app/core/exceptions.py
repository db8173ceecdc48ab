"""
Exceptions raised by the planning services.

Each carries the HTTP status and error code the API layer answers with, so
routers can let them propagate to the registered handler.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    """Standardized error codes for the application."""

    INVALID_TRIP_INPUT = "INVALID_TRIP_INPUT"
    TRIP_NOT_FOUND = "TRIP_NOT_FOUND"

    RATE_LIMITED = "RATE_LIMITED"
    QUOTA_EXCEEDED = "QUOTA_EXCEEDED"

    GENERATION_UNAVAILABLE = "GENERATION_UNAVAILABLE"
    ITINERARY_PARSE_FAILED = "ITINERARY_PARSE_FAILED"
    ITINERARY_INVALID = "ITINERARY_INVALID"

    ENRICHMENT_UNAVAILABLE = "ENRICHMENT_UNAVAILABLE"
    ASSISTANT_UNAVAILABLE = "ASSISTANT_UNAVAILABLE"


class TripPlannerError(Exception):
    """Base exception for the trip planner backend."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code


class InvalidTripInputError(TripPlannerError):
    """Raised when trip parameters are rejected before any external call."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(
            message=message,
            error_code=ErrorCode.INVALID_TRIP_INPUT,
            details={"field": field} if field else None,
            status_code=400,
        )


class TripNotFoundError(TripPlannerError):
    """
    Raised for missing trips and for every failed share-token lookup.

    The message never says which case occurred.
    """

    def __init__(self):
        super().__init__(
            message="Trip not found",
            error_code=ErrorCode.TRIP_NOT_FOUND,
            status_code=404,
        )


class RateLimitedError(TripPlannerError):
    def __init__(self, message: str = "Rate limit exceeded. Please try again in a moment."):
        super().__init__(
            message=message,
            error_code=ErrorCode.RATE_LIMITED,
            status_code=429,
        )


class QuotaExceededError(TripPlannerError):
    def __init__(self, message: str = "AI usage limit reached. Please add credits to continue."):
        super().__init__(
            message=message,
            error_code=ErrorCode.QUOTA_EXCEEDED,
            status_code=402,
        )


class GenerationUnavailableError(TripPlannerError):
    """Raised when the text-generation backend cannot be reached or errors out."""

    def __init__(
        self,
        message: str = "Itinerary generation backend is unavailable. Please try again.",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            error_code=ErrorCode.GENERATION_UNAVAILABLE,
            details=details,
            status_code=503,
        )


class ItineraryParseError(TripPlannerError):
    """Raised when model output is not JSON even after removing code fences."""

    def __init__(self, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="Could not interpret AI response. Please try again.",
            error_code=ErrorCode.ITINERARY_PARSE_FAILED,
            details=details,
            status_code=502,
        )


class ItineraryValidationError(TripPlannerError):
    """Raised when parsed JSON does not have the itinerary shape."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code=ErrorCode.ITINERARY_INVALID,
            details=details,
            status_code=502,
        )


class EnrichmentUnavailableError(TripPlannerError):
    def __init__(self, message: str = "Place lookup service is not configured"):
        super().__init__(
            message=message,
            error_code=ErrorCode.ENRICHMENT_UNAVAILABLE,
            status_code=503,
        )


class AssistantUnavailableError(TripPlannerError):
    def __init__(self, message: str = "Trip assistant is unavailable. Please try again later."):
        super().__init__(
            message=message,
            error_code=ErrorCode.ASSISTANT_UNAVAILABLE,
            status_code=503,
        )
