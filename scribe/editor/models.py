"""
Chapter models.

Chapters live embedded in the manuscript's JSON content column, so these
models round-trip through plain dicts.
"""

from enum import Enum
from typing import Optional, List, Dict, Any

from pydantic import BaseModel, Field


class ChapterStatus(str, Enum):
    DRAFT = "draft"
    REVISION = "revision"
    FINAL = "final"


class ChapterMetadata(BaseModel):
    """Author's notes, tags and workflow status for a chapter."""
    notes: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    status: Optional[ChapterStatus] = None


class Chapter(BaseModel):
    """A titled unit of narrative content; id is unique within its manuscript."""
    id: str
    title: str
    content: str = ""
    metadata: Optional[ChapterMetadata] = None

    def to_record(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Chapter":
        return cls.model_validate(record)
