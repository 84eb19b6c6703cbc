"""API route modules."""
from .vital_types import router as vital_types_router
from .readings import router as readings_router
from .alerts import router as alerts_router

__all__ = [
    "vital_types_router",
    "readings_router",
    "alerts_router",
]
