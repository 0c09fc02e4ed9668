"""
Manuscript Service

Handles manuscript records: the author's library, creation, metadata
edits and persistence of the embedded chapter list.
"""

from datetime import datetime, timezone
from typing import Optional, Dict, Any, List
from uuid import UUID, uuid4

from supabase import Client

from .client import get_supabase_admin_client


class ManuscriptNotFoundError(Exception):
    """Raised when a manuscript is not found in the database."""
    pass


def default_chapters() -> List[Dict[str, Any]]:
    """Chapter list of a freshly created manuscript."""
    return [{"id": "1", "title": "Chapter 1", "content": ""}]


def chapters_from_content(content: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Extract the chapter list from a manuscript's JSON content column."""
    if isinstance(content, dict) and isinstance(content.get("chapters"), list):
        return content["chapters"]
    return default_chapters()


class ManuscriptService:
    """
    Service class for manuscript operations.
    """

    def __init__(self, client: Optional[Client] = None):
        self._client = client

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = get_supabase_admin_client()
        return self._client

    # =========================================================================
    # Creation
    # =========================================================================

    async def create(
        self,
        user_id: UUID | str,
        title: str,
        description: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Create a new manuscript with a single empty chapter.

        Raises:
            ValueError: If the title is blank
        """
        if not title or not title.strip():
            raise ValueError("Title is required")

        now = datetime.now(timezone.utc).isoformat()
        manuscript_data = {
            "id": str(uuid4()),
            "user_id": str(user_id),
            "title": title.strip(),
            "description": description,
            "content": {"chapters": default_chapters()},
            "created_at": now,
            "updated_at": now,
        }

        result = self.client.table("manuscripts").insert(manuscript_data).execute()
        return result.data[0]

    # =========================================================================
    # Retrieval
    # =========================================================================

    async def get_by_id(self, manuscript_id: UUID | str) -> Optional[Dict[str, Any]]:
        """Get manuscript by ID."""
        result = (
            self.client.table("manuscripts")
            .select("*")
            .eq("id", str(manuscript_id))
            .execute()
        )
        return result.data[0] if result.data else None

    async def get_user_manuscripts(
        self,
        user_id: UUID | str,
        *,
        limit: int = 50,
        offset: int = 0,
    ) -> List[Dict[str, Any]]:
        """
        Get the author's library, most recently edited first.
        """
        result = (
            self.client.table("manuscripts")
            .select("*")
            .eq("user_id", str(user_id))
            .order("updated_at", desc=True)
            .limit(limit)
            .offset(offset)
            .execute()
        )
        return result.data

    # =========================================================================
    # Updates
    # =========================================================================

    async def update(
        self, manuscript_id: UUID | str, data: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Update manuscript fields."""
        update_data = {k: v for k, v in data.items() if v is not None}
        update_data["updated_at"] = datetime.now(timezone.utc).isoformat()

        result = (
            self.client.table("manuscripts")
            .update(update_data)
            .eq("id", str(manuscript_id))
            .execute()
        )

        if not result.data:
            raise ManuscriptNotFoundError(f"Manuscript {manuscript_id} not found")

        return result.data[0]

    async def save_chapters(
        self, manuscript_id: UUID | str, chapters: List[Dict[str, Any]]
    ) -> Dict[str, Any]:
        """
        Overwrite the manuscript's chapter list.

        Last write wins: there is no version check against concurrent
        sessions editing the same manuscript.
        """
        return await self.update(manuscript_id, {"content": {"chapters": chapters}})

    # =========================================================================
    # Deletion
    # =========================================================================

    async def delete(self, manuscript_id: UUID | str) -> None:
        """Delete a manuscript. Related rows cascade in the database."""
        result = (
            self.client.table("manuscripts")
            .delete()
            .eq("id", str(manuscript_id))
            .execute()
        )
        if not result.data:
            raise ManuscriptNotFoundError(f"Manuscript {manuscript_id} not found")
