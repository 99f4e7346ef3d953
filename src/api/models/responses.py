"""Pydantic request and response models for API endpoints."""

from pydantic import BaseModel, Field

from models.charges import TravelData
from models.entries import CamelModel, TimeEntry


class HealthResponse(BaseModel):
    """Health check response."""

    status: str  # "healthy" or "unhealthy"
    version: str
    database_available: bool
    timestamp: str  # ISO 8601 UTC
    error: str | None = None


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    code: str
    details: list[str] = []


class ErrorCodes:
    """Error code constants."""

    INVALID_REQUEST = "INVALID_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    UNSUPPORTED_MEDIA_TYPE = "UNSUPPORTED_MEDIA_TYPE"
    FORMAT_ERROR = "FORMAT_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class TextExtractRequest(CamelModel):
    """Page text already pulled out of a PDF by the caller."""

    variant: str
    text: str
    fragments: list[dict] = Field(default_factory=list)
    format: str = "report"  # "report" or "timesheet"


class ChargesRequest(CamelModel):
    entries: list[TimeEntry]
    travel_data: TravelData | None = None
