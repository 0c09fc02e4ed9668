"""
Chapter Version Routes

Save and browse numbered snapshots of a chapter.
"""

from typing import Optional, List, Dict, Any

from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel

from scribe.database.manuscripts import chapters_from_content
from scribe.database.versions import ChapterVersionService, VersionNotFoundError
from scribe.editor.text import count_words
from scribe.utils.logging import versions_logger
from .dependencies import get_owned_manuscript, get_version_service


router = APIRouter(prefix="/api/manuscripts/{manuscript_id}", tags=["versions"])


class VersionResponse(BaseModel):
    id: str
    chapter_id: str
    version_number: int
    title: str
    content: str
    word_count: int
    created_at: Optional[str] = None


class SaveVersionRequest(BaseModel):
    """Snapshot payload; omitted fields come from the saved chapter."""
    title: Optional[str] = None
    content: Optional[str] = None


def _response(version: Dict[str, Any]) -> VersionResponse:
    return VersionResponse(
        id=version["id"],
        chapter_id=version["chapter_id"],
        version_number=version["version_number"],
        title=version["title"],
        content=version["content"],
        word_count=count_words(version["content"]),
        created_at=version.get("created_at"),
    )


@router.get("/chapters/{chapter_id}/versions", response_model=List[VersionResponse])
async def list_versions(
    chapter_id: str,
    manuscript: Dict[str, Any] = Depends(get_owned_manuscript),
    service: ChapterVersionService = Depends(get_version_service),
):
    """Snapshots of a chapter, newest first."""
    versions = await service.list_versions(manuscript["id"], chapter_id)
    return [_response(v) for v in versions]


@router.post("/chapters/{chapter_id}/versions", response_model=VersionResponse, status_code=201)
async def save_version(
    chapter_id: str,
    request: Optional[SaveVersionRequest] = None,
    manuscript: Dict[str, Any] = Depends(get_owned_manuscript),
    service: ChapterVersionService = Depends(get_version_service),
):
    """Snapshot a chapter under the next version number."""
    chapter = next(
        (c for c in chapters_from_content(manuscript.get("content")) if c.get("id") == chapter_id),
        None,
    )
    request = request or SaveVersionRequest()
    if chapter is None and (request.title is None or request.content is None):
        raise HTTPException(status_code=404, detail="Chapter not found")

    title = request.title if request.title is not None else chapter["title"]
    content = request.content if request.content is not None else chapter.get("content", "")

    version = await service.save_version(manuscript["id"], chapter_id, title, content)
    versions_logger.info(
        "Version saved",
        manuscript_id=manuscript["id"],
        chapter_id=chapter_id,
        version_number=version["version_number"],
    )
    return _response(version)


@router.get("/versions/{version_id}", response_model=VersionResponse)
async def get_version(
    version_id: str,
    manuscript: Dict[str, Any] = Depends(get_owned_manuscript),
    service: ChapterVersionService = Depends(get_version_service),
):
    try:
        version = await service.get_for_manuscript(manuscript["id"], version_id)
    except VersionNotFoundError:
        raise HTTPException(status_code=404, detail="Version not found")
    return _response(version)
