from fastapi import APIRouter

# Subrouters are imported and re-exported for convenience
from .hackathons import router as hackathons_router  # noqa: F401
from .evaluations import router as evaluations_router  # noqa: F401
from .judges import router as judges_router  # noqa: F401

__all__ = [
    "APIRouter",
    "hackathons_router",
    "evaluations_router",
    "judges_router",
]
