"""
Draft Service

Named copies of a manuscript's whole chapter list. Exactly one draft per
manuscript is marked current: the last one saved or loaded.
"""

from datetime import datetime, timezone
from typing import Optional, Dict, Any, List
from uuid import UUID, uuid4

from supabase import Client

from .client import get_supabase_admin_client


class DraftNotFoundError(Exception):
    """Raised when a draft is not found."""
    pass


class DraftService:
    """
    Service class for manuscript drafts.
    """

    def __init__(self, client: Optional[Client] = None):
        self._client = client

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = get_supabase_admin_client()
        return self._client

    async def _clear_current(self, manuscript_id: UUID | str) -> None:
        (
            self.client.table("drafts")
            .update({"is_current": False})
            .eq("manuscript_id", str(manuscript_id))
            .execute()
        )

    async def save(
        self,
        manuscript_id: UUID | str,
        title: str,
        chapters: List[Dict[str, Any]],
        description: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Save the given chapter list as a new current draft.

        Raises:
            ValueError: If the title is blank
        """
        if not title or not title.strip():
            raise ValueError("Draft title is required")

        await self._clear_current(manuscript_id)

        now = datetime.now(timezone.utc).isoformat()
        draft_data = {
            "id": str(uuid4()),
            "manuscript_id": str(manuscript_id),
            "title": title.strip(),
            "description": description,
            "content": {"chapters": chapters},
            "is_current": True,
            "created_at": now,
            "updated_at": now,
        }

        result = self.client.table("drafts").insert(draft_data).execute()
        return result.data[0]

    async def list_drafts(self, manuscript_id: UUID | str) -> List[Dict[str, Any]]:
        """Drafts of a manuscript, newest first."""
        result = (
            self.client.table("drafts")
            .select("*")
            .eq("manuscript_id", str(manuscript_id))
            .order("created_at", desc=True)
            .execute()
        )
        return result.data

    async def get_by_id(self, draft_id: UUID | str) -> Optional[Dict[str, Any]]:
        result = (
            self.client.table("drafts")
            .select("*")
            .eq("id", str(draft_id))
            .execute()
        )
        return result.data[0] if result.data else None

    async def mark_current(self, draft: Dict[str, Any]) -> List[Dict[str, Any]]:
        """
        Make a draft the current one and return its chapter list.
        """
        await self._clear_current(draft["manuscript_id"])
        result = (
            self.client.table("drafts")
            .update({
                "is_current": True,
                "updated_at": datetime.now(timezone.utc).isoformat(),
            })
            .eq("id", str(draft["id"]))
            .execute()
        )
        if not result.data:
            raise DraftNotFoundError(f"Draft {draft['id']} not found")

        content = draft.get("content") or {}
        return list(content.get("chapters") or [])

    async def delete(self, draft_id: UUID | str) -> None:
        result = (
            self.client.table("drafts")
            .delete()
            .eq("id", str(draft_id))
            .execute()
        )
        if not result.data:
            raise DraftNotFoundError(f"Draft {draft_id} not found")
