"""API Pydantic models."""

from .responses import (
    ChargesRequest,
    ErrorCodes,
    ErrorResponse,
    HealthResponse,
    TextExtractRequest,
)

__all__ = [
    "HealthResponse",
    "ErrorResponse",
    "ErrorCodes",
    "TextExtractRequest",
    "ChargesRequest",
]
