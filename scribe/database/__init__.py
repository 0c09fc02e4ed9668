"""
Scribe Database Layer

Supabase client and service classes for manuscripts, chapter versions,
drafts and story elements.
"""

from .client import get_supabase_admin_client, verify_supabase_connection, SupabaseClientError
from .manuscripts import ManuscriptService, ManuscriptNotFoundError
from .versions import ChapterVersionService, VersionNotFoundError
from .drafts import DraftService, DraftNotFoundError
from .story_elements import (
    StoryElementService,
    StoryElementNotFoundError,
    ELEMENT_SERVICES,
    get_element_service,
)

__all__ = [
    "get_supabase_admin_client",
    "verify_supabase_connection",
    "SupabaseClientError",
    "ManuscriptService",
    "ManuscriptNotFoundError",
    "ChapterVersionService",
    "VersionNotFoundError",
    "DraftService",
    "DraftNotFoundError",
    "StoryElementService",
    "StoryElementNotFoundError",
    "ELEMENT_SERVICES",
    "get_element_service",
]
