"""
Manuscript API Routes

The author's library and the manuscript record itself, including the
chapter list written by the editor's autosave.
"""

from typing import Optional, List, Dict, Any

from fastapi import APIRouter, HTTPException, Depends, Query
from pydantic import BaseModel

from scribe.database.manuscripts import (
    ManuscriptNotFoundError,
    ManuscriptService,
    chapters_from_content,
)
from scribe.editor.models import Chapter
from scribe.editor.text import count_words
from scribe.utils.logging import api_logger
from .auth import get_current_user_id
from .dependencies import get_manuscript_service, get_owned_manuscript


router = APIRouter(prefix="/api/manuscripts", tags=["manuscripts"])


# =============================================================================
# Request/Response Models
# =============================================================================

class ManuscriptSummary(BaseModel):
    """Library entry."""
    id: str
    title: str
    description: Optional[str] = None
    chapter_count: int
    word_count: int
    updated_at: Optional[str] = None


class ManuscriptResponse(BaseModel):
    """Full manuscript with its chapters."""
    id: str
    title: str
    description: Optional[str] = None
    chapters: List[Chapter]
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class CreateManuscriptRequest(BaseModel):
    title: str
    description: Optional[str] = None


class UpdateManuscriptRequest(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None


class SaveChaptersRequest(BaseModel):
    chapters: List[Chapter]


def _summary(manuscript: Dict[str, Any]) -> ManuscriptSummary:
    chapters = chapters_from_content(manuscript.get("content"))
    return ManuscriptSummary(
        id=manuscript["id"],
        title=manuscript["title"],
        description=manuscript.get("description"),
        chapter_count=len(chapters),
        word_count=sum(count_words(c.get("content", "")) for c in chapters),
        updated_at=manuscript.get("updated_at"),
    )


def _response(manuscript: Dict[str, Any]) -> ManuscriptResponse:
    return ManuscriptResponse(
        id=manuscript["id"],
        title=manuscript["title"],
        description=manuscript.get("description"),
        chapters=[Chapter.from_record(c) for c in chapters_from_content(manuscript.get("content"))],
        created_at=manuscript.get("created_at"),
        updated_at=manuscript.get("updated_at"),
    )


# =============================================================================
# Library
# =============================================================================

@router.get("", response_model=List[ManuscriptSummary])
async def list_manuscripts(
    limit: int = Query(default=50, le=100),
    offset: int = Query(default=0, ge=0),
    user_id: str = Depends(get_current_user_id),
    service: ManuscriptService = Depends(get_manuscript_service),
):
    """The author's manuscripts, most recently edited first."""
    manuscripts = await service.get_user_manuscripts(user_id, limit=limit, offset=offset)
    return [_summary(m) for m in manuscripts]


@router.post("", response_model=ManuscriptResponse, status_code=201)
async def create_manuscript(
    request: CreateManuscriptRequest,
    user_id: str = Depends(get_current_user_id),
    service: ManuscriptService = Depends(get_manuscript_service),
):
    try:
        manuscript = await service.create(user_id, request.title, request.description)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    api_logger.info("Manuscript created", manuscript_id=manuscript["id"])
    return _response(manuscript)


# =============================================================================
# Single Manuscript
# =============================================================================

@router.get("/{manuscript_id}", response_model=ManuscriptResponse)
async def get_manuscript(manuscript: Dict[str, Any] = Depends(get_owned_manuscript)):
    return _response(manuscript)


@router.patch("/{manuscript_id}", response_model=ManuscriptResponse)
async def update_manuscript(
    request: UpdateManuscriptRequest,
    manuscript: Dict[str, Any] = Depends(get_owned_manuscript),
    service: ManuscriptService = Depends(get_manuscript_service),
):
    if request.title is not None and not request.title.strip():
        raise HTTPException(status_code=400, detail="Title is required")

    try:
        updated = await service.update(manuscript["id"], request.model_dump(exclude_none=True))
    except ManuscriptNotFoundError:
        raise HTTPException(status_code=404, detail="Manuscript not found")
    return _response(updated)


@router.put("/{manuscript_id}/chapters")
async def save_chapters(
    request: SaveChaptersRequest,
    manuscript: Dict[str, Any] = Depends(get_owned_manuscript),
    service: ManuscriptService = Depends(get_manuscript_service),
):
    """
    Overwrite the chapter list (the editor's autosave target).

    Last write wins.
    """
    if not request.chapters:
        raise HTTPException(status_code=400, detail="A manuscript needs at least one chapter")

    ids = [c.id for c in request.chapters]
    if len(ids) != len(set(ids)):
        raise HTTPException(status_code=400, detail="Chapter ids must be unique")

    try:
        updated = await service.save_chapters(
            manuscript["id"], [c.to_record() for c in request.chapters]
        )
    except ManuscriptNotFoundError:
        raise HTTPException(status_code=404, detail="Manuscript not found")

    return {"success": True, "updated_at": updated.get("updated_at")}


@router.delete("/{manuscript_id}")
async def delete_manuscript(
    manuscript: Dict[str, Any] = Depends(get_owned_manuscript),
    service: ManuscriptService = Depends(get_manuscript_service),
):
    try:
        await service.delete(manuscript["id"])
    except ManuscriptNotFoundError:
        raise HTTPException(status_code=404, detail="Manuscript not found")

    api_logger.info("Manuscript deleted", manuscript_id=manuscript["id"])
    return {"success": True}
