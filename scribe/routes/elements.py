"""
Story Element Routes

CRUD for the manuscript's story bible: characters, locations, timeline
events, plot points and conflicts.
"""

from typing import Any, Callable, Dict

from fastapi import APIRouter, HTTPException, Depends, Body

from scribe.database.story_elements import (
    ELEMENT_SERVICES,
    StoryElementNotFoundError,
    StoryElementService,
)
from .dependencies import get_element_services, get_owned_manuscript


router = APIRouter(prefix="/api/manuscripts/{manuscript_id}/elements", tags=["elements"])


def _service_for(kind: str, services: Callable[[str], StoryElementService]) -> StoryElementService:
    if kind not in ELEMENT_SERVICES:
        raise HTTPException(
            status_code=404,
            detail=f"Unknown element kind. Available: {', '.join(ELEMENT_SERVICES)}"
        )
    return services(kind)


async def _owned_element(
    service: StoryElementService, element_id: str, manuscript: Dict[str, Any]
) -> Dict[str, Any]:
    element = await service.get_by_id(element_id)
    if not element or element.get("manuscript_id") != manuscript["id"]:
        raise HTTPException(status_code=404, detail=f"{service.label} not found")
    return element


@router.get("/{kind}")
async def list_elements(
    kind: str,
    manuscript: Dict[str, Any] = Depends(get_owned_manuscript),
    services: Callable[[str], StoryElementService] = Depends(get_element_services),
):
    service = _service_for(kind, services)
    return {kind: await service.list_for_manuscript(manuscript["id"])}


@router.post("/{kind}", status_code=201)
async def create_element(
    kind: str,
    data: Dict[str, Any] = Body(...),
    manuscript: Dict[str, Any] = Depends(get_owned_manuscript),
    services: Callable[[str], StoryElementService] = Depends(get_element_services),
):
    service = _service_for(kind, services)
    try:
        return await service.create(manuscript["id"], data)
    except (TypeError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.patch("/{kind}/{element_id}")
async def update_element(
    kind: str,
    element_id: str,
    data: Dict[str, Any] = Body(...),
    manuscript: Dict[str, Any] = Depends(get_owned_manuscript),
    services: Callable[[str], StoryElementService] = Depends(get_element_services),
):
    service = _service_for(kind, services)
    await _owned_element(service, element_id, manuscript)
    try:
        return await service.update(element_id, data)
    except (TypeError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StoryElementNotFoundError:
        raise HTTPException(status_code=404, detail=f"{service.label} not found")


@router.delete("/{kind}/{element_id}")
async def delete_element(
    kind: str,
    element_id: str,
    manuscript: Dict[str, Any] = Depends(get_owned_manuscript),
    services: Callable[[str], StoryElementService] = Depends(get_element_services),
):
    service = _service_for(kind, services)
    await _owned_element(service, element_id, manuscript)
    try:
        await service.delete(element_id)
    except StoryElementNotFoundError:
        raise HTTPException(status_code=404, detail=f"{service.label} not found")
    return {"success": True}
