"""API route modules."""

from .charges import router as charges_router
from .health import router as health_router
from .reports import router as reports_router

__all__ = ["health_router", "reports_router", "charges_router"]
