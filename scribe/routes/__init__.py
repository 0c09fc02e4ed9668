"""
HTTP routers for the manuscript editor API.
"""

from .ai import router as ai_router
from .drafts import router as drafts_router
from .elements import router as elements_router
from .manuscripts import router as manuscripts_router
from .versions import router as versions_router

__all__ = [
    "ai_router",
    "drafts_router",
    "elements_router",
    "manuscripts_router",
    "versions_router",
]
