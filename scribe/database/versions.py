"""
Chapter Version Service

Immutable, numbered snapshots of a single chapter's content.
"""

from typing import Optional, Dict, Any, List
from uuid import UUID

from supabase import Client

from .client import get_supabase_admin_client


class VersionNotFoundError(Exception):
    """Raised when a chapter version is not found."""
    pass


class ChapterVersionService:
    """
    Service class for chapter version snapshots.

    Version numbers are scoped to (manuscript, chapter) and allocated by the
    create_chapter_version database function, which locks the pair, takes
    max + 1 and inserts in one transaction. Two concurrent snapshots of the
    same chapter therefore never share a number.
    """

    def __init__(self, client: Optional[Client] = None):
        self._client = client

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = get_supabase_admin_client()
        return self._client

    # =========================================================================
    # Snapshots
    # =========================================================================

    async def save_version(
        self,
        manuscript_id: UUID | str,
        chapter_id: str,
        title: str,
        content: str,
    ) -> Dict[str, Any]:
        """
        Snapshot a chapter.

        Returns:
            The inserted version row, including its version_number
        """
        result = self.client.rpc(
            "create_chapter_version",
            {
                "p_manuscript_id": str(manuscript_id),
                "p_chapter_id": str(chapter_id),
                "p_title": title,
                "p_content": content,
            }
        ).execute()

        # The function returns setof chapter_versions
        if isinstance(result.data, list):
            return result.data[0]
        return result.data

    # =========================================================================
    # Retrieval
    # =========================================================================

    async def list_versions(
        self, manuscript_id: UUID | str, chapter_id: str
    ) -> List[Dict[str, Any]]:
        """All snapshots of a chapter, newest first."""
        result = (
            self.client.table("chapter_versions")
            .select("*")
            .eq("manuscript_id", str(manuscript_id))
            .eq("chapter_id", str(chapter_id))
            .order("version_number", desc=True)
            .execute()
        )
        return result.data

    async def get_by_id(self, version_id: UUID | str) -> Optional[Dict[str, Any]]:
        result = (
            self.client.table("chapter_versions")
            .select("*")
            .eq("id", str(version_id))
            .execute()
        )
        return result.data[0] if result.data else None

    async def get_for_manuscript(
        self, manuscript_id: UUID | str, version_id: UUID | str
    ) -> Dict[str, Any]:
        """
        A version, provided it belongs to the manuscript.

        Raises:
            VersionNotFoundError: Unknown id or another manuscript's version
        """
        version = await self.get_by_id(version_id)
        if not version or version.get("manuscript_id") != str(manuscript_id):
            raise VersionNotFoundError(f"Version {version_id} not found")
        return version

    @staticmethod
    def restore_version(version: Dict[str, Any]) -> str:
        """
        Content to put back into the editor.

        Never touches the chapter list; the caller writes the content.
        """
        return version["content"]
