"""
Pydantic views of the timeline tree.

These are what queries return and what the cache stores (as their JSON
form), so nothing here holds a reference to a database session.
"""

from __future__ import annotations

from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field


class ObjectType(str, Enum):
    TIMELINE = "Timeline"
    EXHIBIT = "Exhibit"
    CONTENT_ITEM = "ContentItem"


class ContentItemNode(BaseModel):
    id: UUID
    title: str | None = None
    caption: str | None = None
    media_type: str | None = None
    uri: str | None = None
    media_source: str | None = None
    attribution: str | None = None
    depth: int


class ExhibitNode(BaseModel):
    id: UUID
    title: str | None = None
    year: float
    depth: int
    content_items: list[ContentItemNode] = Field(default_factory=list)


class TimelineNode(BaseModel):
    id: UUID
    parent_id: UUID | None = None
    title: str | None = None
    regime: str | None = None
    from_year: float
    to_year: float
    depth: int
    timelines: list[TimelineNode] = Field(default_factory=list)
    exhibits: list[ExhibitNode] = Field(default_factory=list)

    def iter_nodes(self):
        """Depth-first walk over this node and its nested timelines."""
        yield self
        for child in self.timelines:
            yield from child.iter_nodes()


class SearchResult(BaseModel):
    id: UUID
    title: str | None = None
    object_type: ObjectType


class BookmarkModel(BaseModel):
    id: UUID
    name: str | None = None
    url: str | None = None
    lag_time: int | None = None
    description: str | None = None
    sequence_id: int = 0


class TourModel(BaseModel):
    id: UUID
    name: str
    category: str | None = None
    sequence: int = 0
    bookmarks: list[BookmarkModel] = Field(default_factory=list)


class ServiceInformation(BaseModel):
    thumbnails_path: str
