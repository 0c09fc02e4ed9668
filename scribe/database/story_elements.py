"""
Story Element Services

Flat story-bible records scoped to a manuscript: characters, locations,
timeline events, plot points and conflicts. Each table gets the same
create/list/update/delete operations; subclasses declare their columns,
required fields and list ordering.
"""

from datetime import datetime, timezone
from typing import Optional, Dict, Any, List, Tuple, Type
from uuid import UUID, uuid4

from supabase import Client

from .client import get_supabase_admin_client


class StoryElementNotFoundError(Exception):
    """Raised when a story element is not found."""
    pass


class StoryElementService:
    """
    Base service for a manuscript-scoped story element table.
    """

    table: str = ""
    label: str = "Element"
    fields: Tuple[str, ...] = ()
    required: Tuple[str, ...] = ()
    # (column, descending)
    ordering: Tuple[str, bool] = ("created_at", True)

    def __init__(self, client: Optional[Client] = None):
        self._client = client

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = get_supabase_admin_client()
        return self._client

    def clean(self, data: Dict[str, Any], *, partial: bool = False) -> Dict[str, Any]:
        """
        Keep known columns and check required ones.

        Raises:
            ValueError: If a required field is missing or blank
        """
        cleaned = {k: v for k, v in data.items() if k in self.fields}
        for name in self.required:
            if partial and name not in cleaned:
                continue
            value = cleaned.get(name)
            if value is None or (isinstance(value, str) and not value.strip()):
                raise ValueError(f"{self.label} {name.replace('_', ' ')} is required")
        return cleaned

    async def create(self, manuscript_id: UUID | str, data: Dict[str, Any]) -> Dict[str, Any]:
        now = datetime.now(timezone.utc).isoformat()
        row = {
            **self.clean(data),
            "id": str(uuid4()),
            "manuscript_id": str(manuscript_id),
            "created_at": now,
            "updated_at": now,
        }
        result = self.client.table(self.table).insert(row).execute()
        return result.data[0]

    async def list_for_manuscript(self, manuscript_id: UUID | str) -> List[Dict[str, Any]]:
        column, desc = self.ordering
        result = (
            self.client.table(self.table)
            .select("*")
            .eq("manuscript_id", str(manuscript_id))
            .order(column, desc=desc)
            .execute()
        )
        return result.data

    async def get_by_id(self, element_id: UUID | str) -> Optional[Dict[str, Any]]:
        result = (
            self.client.table(self.table)
            .select("*")
            .eq("id", str(element_id))
            .execute()
        )
        return result.data[0] if result.data else None

    async def update(self, element_id: UUID | str, data: Dict[str, Any]) -> Dict[str, Any]:
        update_data = self.clean(data, partial=True)
        update_data["updated_at"] = datetime.now(timezone.utc).isoformat()

        result = (
            self.client.table(self.table)
            .update(update_data)
            .eq("id", str(element_id))
            .execute()
        )
        if not result.data:
            raise StoryElementNotFoundError(f"{self.label} {element_id} not found")
        return result.data[0]

    async def delete(self, element_id: UUID | str) -> None:
        result = (
            self.client.table(self.table)
            .delete()
            .eq("id", str(element_id))
            .execute()
        )
        if not result.data:
            raise StoryElementNotFoundError(f"{self.label} {element_id} not found")


class CharacterService(StoryElementService):
    table = "characters"
    label = "Character"
    fields = ("name", "role", "description", "personality", "background", "notes", "relationships")
    required = ("name",)


class LocationService(StoryElementService):
    table = "locations"
    label = "Location"
    fields = ("name", "type", "description", "notes")
    required = ("name",)


class TimelineEventService(StoryElementService):
    table = "timeline_events"
    label = "Event"
    fields = ("title", "description", "event_date", "event_time", "category")
    required = ("title",)
    ordering = ("created_at", False)


class PlotPointService(StoryElementService):
    table = "plot_points"
    label = "Plot point"
    fields = ("title", "chapter_id", "description", "plot_type", "tension_level", "sequence_order")
    required = ("title", "chapter_id")
    ordering = ("sequence_order", False)

    def clean(self, data: Dict[str, Any], *, partial: bool = False) -> Dict[str, Any]:
        cleaned = super().clean(data, partial=partial)
        tension = cleaned.get("tension_level")
        if tension is not None and not 1 <= int(tension) <= 10:
            raise ValueError("Tension level must be between 1 and 10")
        return cleaned


class ConflictService(StoryElementService):
    table = "conflicts"
    label = "Conflict"
    fields = (
        "title", "description", "conflict_type", "status",
        "introduced_chapter", "resolved_chapter", "characters_involved",
    )
    required = ("title",)


ELEMENT_SERVICES: Dict[str, Type[StoryElementService]] = {
    service.table: service
    for service in (
        CharacterService,
        LocationService,
        TimelineEventService,
        PlotPointService,
        ConflictService,
    )
}


def get_element_service(kind: str, client: Optional[Client] = None) -> StoryElementService:
    """
    Service for a story element table.

    Raises:
        KeyError: If the kind is not a known element table
    """
    return ELEMENT_SERVICES[kind](client)
