"""
Query Handler - read-only endpoints over a collection's timeline tree.

Every read has two routes: one naming the collection by its super collection
and collection segments, and a bare one that falls back to the default
collection. Unknown collections read as empty results, never as errors.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database.base import get_db
from dependencies.auth import get_optional_identity
from dependencies.services import get_cache, get_settings
from handlers.errors import handle_tree_error
from models.api_models import ContentPathResponse, SearchResponse, ToursResponse
from models.tree_models import ServiceInformation, TimelineNode
from operators.access_operator import Identity
from operators.query_operator import (
    collection_id_or_default,
    get_content_path,
    get_service_information,
    get_timelines,
    get_tours,
    search,
)
from settings import ServiceSettings
from utils.cache import Cache

router = APIRouter(prefix="/api", tags=["queries"])


# =============================================================================
# TIMELINES
# =============================================================================


def _timelines(
    db: Session,
    cache: Cache,
    settings: ServiceSettings,
    identity: Identity | None,
    super_collection: str | None,
    collection: str | None,
    start: float | None,
    end: float | None,
    min_span: float | None,
    common_ancestor: UUID | None,
    max_elements: int | None,
) -> TimelineNode | None:
    try:
        collection_id = collection_id_or_default(
            db, cache, settings, super_collection, collection
        )
        if collection_id is None:
            return None
        return get_timelines(
            db,
            cache,
            settings,
            identity,
            collection_id,
            start=start,
            end=end,
            min_span=min_span,
            common_ancestor=common_ancestor,
            max_elements=max_elements,
        )
    except Exception as e:
        handle_tree_error(e, db)


@router.get("/timelines", response_model=TimelineNode | None)
def timelines_default(
    start: float | None = Query(default=None),
    end: float | None = Query(default=None),
    min_span: float | None = Query(default=None, alias="minspan"),
    common_ancestor: UUID | None = Query(default=None, alias="commonAncestor"),
    max_elements: int | None = Query(default=None, alias="maxElements"),
    db: Session = Depends(get_db),
    cache: Cache = Depends(get_cache),
    settings: ServiceSettings = Depends(get_settings),
    identity: Identity | None = Depends(get_optional_identity),
):
    return _timelines(
        db, cache, settings, identity, None, None,
        start, end, min_span, common_ancestor, max_elements,
    )


@router.get("/{super_collection}/{collection}/timelines", response_model=TimelineNode | None)
def timelines_get(
    super_collection: str,
    collection: str,
    start: float | None = Query(default=None),
    end: float | None = Query(default=None),
    min_span: float | None = Query(default=None, alias="minspan"),
    common_ancestor: UUID | None = Query(default=None, alias="commonAncestor"),
    max_elements: int | None = Query(default=None, alias="maxElements"),
    db: Session = Depends(get_db),
    cache: Cache = Depends(get_cache),
    settings: ServiceSettings = Depends(get_settings),
    identity: Identity | None = Depends(get_optional_identity),
):
    """
    Filtered timeline tree of one collection.

    Query params:
        start, end: year bounds (defaults to the full supported range)
        minspan: minimum timeline span in years
        commonAncestor: timeline to anchor the response at
        maxElements: cap on timelines returned, shallowest first
    """
    return _timelines(
        db, cache, settings, identity, super_collection, collection,
        start, end, min_span, common_ancestor, max_elements,
    )


# =============================================================================
# SEARCH
# =============================================================================


def _search(
    db: Session,
    cache: Cache,
    settings: ServiceSettings,
    super_collection: str | None,
    collection: str | None,
    search_term: str | None,
) -> SearchResponse:
    try:
        collection_id = collection_id_or_default(
            db, cache, settings, super_collection, collection
        )
        if collection_id is None:
            return SearchResponse(ok=True, results=[])
        results = search(db, collection_id, search_term)
    except Exception as e:
        handle_tree_error(e, db)

    return SearchResponse(ok=True, results=results)


@router.get("/search", response_model=SearchResponse)
def search_default(
    search_term: str | None = Query(default=None, alias="searchTerm"),
    db: Session = Depends(get_db),
    cache: Cache = Depends(get_cache),
    settings: ServiceSettings = Depends(get_settings),
):
    return _search(db, cache, settings, None, None, search_term)


@router.get("/{super_collection}/{collection}/search", response_model=SearchResponse)
def search_get(
    super_collection: str,
    collection: str,
    search_term: str | None = Query(default=None, alias="searchTerm"),
    db: Session = Depends(get_db),
    cache: Cache = Depends(get_cache),
    settings: ServiceSettings = Depends(get_settings),
):
    return _search(db, cache, settings, super_collection, collection, search_term)


# =============================================================================
# TOURS
# =============================================================================


def _tours(
    db: Session,
    cache: Cache,
    settings: ServiceSettings,
    super_collection: str | None,
    collection: str | None,
) -> ToursResponse:
    try:
        collection_id = collection_id_or_default(
            db, cache, settings, super_collection, collection
        )
        tours = [] if collection_id is None else get_tours(db, cache, settings, collection_id)
    except Exception as e:
        handle_tree_error(e, db)

    return ToursResponse(ok=True, tours=tours)


@router.get("/tours", response_model=ToursResponse)
def tours_default(
    db: Session = Depends(get_db),
    cache: Cache = Depends(get_cache),
    settings: ServiceSettings = Depends(get_settings),
):
    return _tours(db, cache, settings, None, None)


@router.get("/{super_collection}/{collection}/tours", response_model=ToursResponse)
def tours_get(
    super_collection: str,
    collection: str,
    db: Session = Depends(get_db),
    cache: Cache = Depends(get_cache),
    settings: ServiceSettings = Depends(get_settings),
):
    return _tours(db, cache, settings, super_collection, collection)


# =============================================================================
# CONTENT PATHS
# =============================================================================


def _content_path(
    db: Session,
    cache: Cache,
    settings: ServiceSettings,
    super_collection: str | None,
    collection: str | None,
    reference: str,
) -> ContentPathResponse:
    try:
        collection_id = collection_id_or_default(
            db, cache, settings, super_collection, collection
        )
        path = None
        if collection_id is not None:
            path = get_content_path(db, cache, settings, collection_id, reference)
    except Exception as e:
        handle_tree_error(e, db)

    return ContentPathResponse(ok=path is not None, path=path)


@router.get("/contentpath", response_model=ContentPathResponse)
def content_path_default(
    reference: str = Query(...),
    db: Session = Depends(get_db),
    cache: Cache = Depends(get_cache),
    settings: ServiceSettings = Depends(get_settings),
):
    return _content_path(db, cache, settings, None, None, reference)


@router.get("/{super_collection}/{collection}/contentpath", response_model=ContentPathResponse)
def content_path_get(
    super_collection: str,
    collection: str,
    reference: str = Query(...),
    db: Session = Depends(get_db),
    cache: Cache = Depends(get_cache),
    settings: ServiceSettings = Depends(get_settings),
):
    return _content_path(db, cache, settings, super_collection, collection, reference)


@router.get("/info", response_model=ServiceInformation)
def service_information(settings: ServiceSettings = Depends(get_settings)):
    return get_service_information(settings)
