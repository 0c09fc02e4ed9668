"""
Draft Routes

Named copies of the whole chapter list.
"""

from typing import Optional, Dict, Any

from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel

from scribe.database.drafts import DraftNotFoundError, DraftService
from scribe.database.manuscripts import ManuscriptService, chapters_from_content
from .dependencies import get_draft_service, get_manuscript_service, get_owned_manuscript


router = APIRouter(prefix="/api/manuscripts/{manuscript_id}/drafts", tags=["drafts"])


class SaveDraftRequest(BaseModel):
    title: str
    description: Optional[str] = None


async def _owned_draft(draft_id: str, manuscript: Dict[str, Any], service: DraftService) -> Dict[str, Any]:
    draft = await service.get_by_id(draft_id)
    if not draft or draft.get("manuscript_id") != manuscript["id"]:
        raise HTTPException(status_code=404, detail="Draft not found")
    return draft


@router.get("")
async def list_drafts(
    manuscript: Dict[str, Any] = Depends(get_owned_manuscript),
    service: DraftService = Depends(get_draft_service),
):
    return {"drafts": await service.list_drafts(manuscript["id"])}


@router.post("", status_code=201)
async def save_draft(
    request: SaveDraftRequest,
    manuscript: Dict[str, Any] = Depends(get_owned_manuscript),
    service: DraftService = Depends(get_draft_service),
):
    """Save the manuscript's current chapter list as the current draft."""
    try:
        draft = await service.save(
            manuscript["id"],
            request.title,
            chapters_from_content(manuscript.get("content")),
            request.description,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return draft


@router.post("/{draft_id}/load")
async def load_draft(
    draft_id: str,
    manuscript: Dict[str, Any] = Depends(get_owned_manuscript),
    service: DraftService = Depends(get_draft_service),
    manuscripts: ManuscriptService = Depends(get_manuscript_service),
):
    """Make a draft current and copy its chapters into the manuscript."""
    draft = await _owned_draft(draft_id, manuscript, service)
    try:
        chapters = await service.mark_current(draft)
    except DraftNotFoundError:
        raise HTTPException(status_code=404, detail="Draft not found")

    await manuscripts.save_chapters(manuscript["id"], chapters)
    return {"success": True, "chapters": chapters}


@router.delete("/{draft_id}")
async def delete_draft(
    draft_id: str,
    manuscript: Dict[str, Any] = Depends(get_owned_manuscript),
    service: DraftService = Depends(get_draft_service),
):
    await _owned_draft(draft_id, manuscript, service)
    try:
        await service.delete(draft_id)
    except DraftNotFoundError:
        raise HTTPException(status_code=404, detail="Draft not found")
    return {"success": True}
