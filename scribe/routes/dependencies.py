"""
Shared route dependencies: service factories and manuscript ownership.

Routes take their services through these factories so the app (and tests)
can swap implementations with dependency_overrides.
"""

from typing import Callable, Dict, Any

from fastapi import Depends, HTTPException

from scribe.database.drafts import DraftService
from scribe.database.manuscripts import ManuscriptService
from scribe.database.story_elements import StoryElementService, get_element_service
from scribe.database.versions import ChapterVersionService
from scribe.writer import TranscriptionService, WriterService
from .auth import get_current_user_id


def get_manuscript_service() -> ManuscriptService:
    return ManuscriptService()


def get_version_service() -> ChapterVersionService:
    return ChapterVersionService()


def get_draft_service() -> DraftService:
    return DraftService()


def get_writer_service() -> WriterService:
    return WriterService()


def get_transcription_service() -> TranscriptionService:
    return TranscriptionService()


async def get_owned_manuscript(
    manuscript_id: str,
    user_id: str = Depends(get_current_user_id),
    service: ManuscriptService = Depends(get_manuscript_service),
) -> Dict[str, Any]:
    """The manuscript in the path, if it belongs to the caller."""
    manuscript = await service.get_by_id(manuscript_id)

    if not manuscript:
        raise HTTPException(status_code=404, detail="Manuscript not found")

    if manuscript.get("user_id") != user_id:
        raise HTTPException(status_code=403, detail="Not your manuscript")

    return manuscript


def get_element_services() -> Callable[[str], StoryElementService]:
    """Factory from element kind to its service."""
    return get_element_service
