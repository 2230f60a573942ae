from uuid import UUID

from pydantic import BaseModel, Field

from models.tree_models import SearchResult, TourModel


class CollectionRequest(BaseModel):
    title: str | None = None


class TimelineRequest(BaseModel):
    id: UUID | None = None
    parent_id: UUID | None = None
    title: str | None = None
    regime: str | None = None
    from_year: float
    to_year: float


class ContentItemRequest(BaseModel):
    id: UUID | None = None
    exhibit_id: UUID | None = None
    title: str | None = None
    caption: str | None = None
    media_type: str | None = None
    uri: str | None = None
    media_source: str | None = None
    attribution: str | None = None


class ExhibitRequest(BaseModel):
    id: UUID | None = None
    timeline_id: UUID | None = None
    title: str | None = None
    year: float
    content_items: list[ContentItemRequest] | None = None


class EntityReference(BaseModel):
    id: UUID | None = None


class UserRequest(BaseModel):
    id: UUID | None = None
    display_name: str | None = None
    email: str | None = None


class MutationResponse(BaseModel):
    ok: bool
    id: UUID


class PutExhibitResult(BaseModel):
    exhibit_id: UUID | None = None
    content_item_ids: list[UUID] = Field(default_factory=list)


class DeleteResponse(BaseModel):
    ok: bool


class SearchResponse(BaseModel):
    ok: bool
    # None means no search term was given, [] means nothing matched.
    results: list[SearchResult] | None = None


class ToursResponse(BaseModel):
    ok: bool
    tours: list[TourModel]


class ContentPathResponse(BaseModel):
    ok: bool
    path: str | None = None


class UserResponse(BaseModel):
    user_id: UUID | None = None
    display_name: str | None = None
    email: str | None = None
    name_identifier: str | None = None
    identity_provider: str | None = None


class UserCollectionResponse(BaseModel):
    ok: bool
    collection_uri: str
