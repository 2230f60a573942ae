"""
Query Operator - read paths over the timeline tree.

- Filtered tree views (GetTimelines) with a cache keyed by query shape
- Search across timelines, exhibits and content items of one collection
- Tours with their bookmarks
- Content paths from the root timeline down to a node

Collection owners never read cached tree views, so their own edits are
visible immediately. Everyone else may see results up to one cache TTL old;
writes do not invalidate cached views.
"""

import logging
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session as DBSession

from database import storage
from database.models import (
    ContentItem,
    Exhibit,
    Timeline,
    Tour,
)
from models.tree_models import (
    BookmarkModel,
    ContentItemNode,
    ExhibitNode,
    ObjectType,
    SearchResult,
    ServiceInformation,
    TimelineNode,
    TourModel,
)
from operators.access_operator import Identity, owner_identity
from settings import MAX_YEAR, MIN_YEAR, ServiceSettings
from utils.cache import Cache
from utils.identity import derive_collection_id, friendly_url_decode

logger = logging.getLogger(__name__)

DEFAULT_COLLECTION_CACHE_KEY = "SuperCollections-Default-Guid"


# =============================================================================
# COLLECTION RESOLUTION
# =============================================================================


def collection_id_or_default(
    db: DBSession,
    cache: Cache,
    settings: ServiceSettings,
    super_collection: str | None,
    collection: str | None,
) -> UUID | None:
    """
    Resolve URL segments to a collection id.

    An empty super collection selects the default collection: the first
    collection of the configured default super collection, or of the first
    super collection when that one does not exist.
    """
    if super_collection:
        return derive_collection_id(super_collection, collection or super_collection)

    cached = cache.get(DEFAULT_COLLECTION_CACHE_KEY)
    if cached is not None:
        return UUID(cached)

    default_super = storage.find_super_collection_by_title(
        db, settings.default_super_collection
    )
    if default_super is None:
        default_super = storage.first_super_collection(db)
    if default_super is None:
        logger.warning("default_collection_missing reason=no_super_collections")
        return None

    default_collection = storage.first_collection_of(db, default_super)
    if default_collection is None:
        logger.warning(
            "default_collection_missing super_collection=%s", default_super.title
        )
        return None

    cache.put(
        DEFAULT_COLLECTION_CACHE_KEY,
        str(default_collection.collection_id),
        settings.cache_ttl_seconds,
    )
    return default_collection.collection_id


# =============================================================================
# GET TIMELINES
# =============================================================================


def _identity_key(identity: Identity | None) -> str:
    return identity.cache_key if identity else ""


def can_cache_get_timelines(
    db: DBSession,
    cache: Cache,
    settings: ServiceSettings,
    identity: Identity | None,
    collection_id: UUID,
) -> bool:
    """Cached views are served to everyone except whoever owns the collection."""
    owner_cache_key = f"Collection-To-Owner {collection_id}"
    owner_key = cache.get(owner_cache_key)
    if owner_key is None:
        collection = storage.find_collection(db, collection_id)
        owner = owner_identity(collection.owner) if collection else None
        owner_key = owner.cache_key if owner else ""
        cache.put(owner_cache_key, owner_key, settings.cache_ttl_seconds)

    return owner_key != _identity_key(identity)


def get_timelines_cache_key(
    collection_id: UUID,
    start: float | None,
    end: float | None,
    min_span: float | None,
    common_ancestor: UUID | None,
    max_elements: int | None,
) -> str:
    parts = [
        "" if value is None else str(value)
        for value in (start, end, min_span, common_ancestor, max_elements)
    ]
    return f"GetTimelines {collection_id}|{'|'.join(parts)}"


def _content_item_node(item: ContentItem) -> ContentItemNode:
    return ContentItemNode(
        id=item.content_item_id,
        title=item.title,
        caption=item.caption,
        media_type=item.media_type,
        uri=item.uri,
        media_source=item.media_source,
        attribution=item.attribution,
        depth=item.depth,
    )


def _exhibit_node(exhibit: Exhibit) -> ExhibitNode:
    return ExhibitNode(
        id=exhibit.exhibit_id,
        title=exhibit.title,
        year=exhibit.year,
        depth=exhibit.depth,
        content_items=[_content_item_node(item) for item in exhibit.content_items],
    )


def _timeline_node(timeline: Timeline) -> TimelineNode:
    return TimelineNode(
        id=timeline.timeline_id,
        parent_id=timeline.parent_id,
        title=timeline.title,
        regime=timeline.regime,
        from_year=timeline.from_year,
        to_year=timeline.to_year,
        depth=timeline.depth,
        exhibits=[_exhibit_node(exhibit) for exhibit in timeline.exhibits],
    )


def build_timeline_tree(
    timelines: list[Timeline], common_ancestor: UUID | None = None
) -> TimelineNode | None:
    """
    Nest query rows under their parents and pick the anchor node.

    The anchor is the common ancestor when it is among the rows, otherwise
    the first row (lowest depth, then lowest id). Rows outside the anchor's
    subtree are dropped from the response.
    """
    if not timelines:
        return None

    nodes = {timeline.timeline_id: _timeline_node(timeline) for timeline in timelines}
    for timeline in timelines:
        parent = nodes.get(timeline.parent_id)
        if parent is not None:
            parent.timelines.append(nodes[timeline.timeline_id])

    for node in nodes.values():
        node.timelines.sort(key=lambda child: (child.from_year, str(child.id)))

    if common_ancestor is not None and common_ancestor in nodes:
        return nodes[common_ancestor]
    return nodes[timelines[0].timeline_id]


def get_timelines(
    db: DBSession,
    cache: Cache,
    settings: ServiceSettings,
    identity: Identity | None,
    collection_id: UUID,
    start: float | None = None,
    end: float | None = None,
    min_span: float | None = None,
    common_ancestor: UUID | None = None,
    max_elements: int | None = None,
) -> TimelineNode | None:
    """
    Filtered view of a collection's timeline tree.

    Unspecified bounds default to the full supported year range, min_span to
    0 and max_elements to the configured cap. Returns None when nothing in
    the collection matches.
    """
    cacheable = can_cache_get_timelines(db, cache, settings, identity, collection_id)
    cache_key = get_timelines_cache_key(
        collection_id, start, end, min_span, common_ancestor, max_elements
    )

    if cacheable:
        cached = cache.get(cache_key)
        if cached is not None:
            logger.debug("get_timelines_cache_hit collection_id=%s", collection_id)
            return TimelineNode.model_validate(cached)

    timelines = storage.timelines_query(
        db,
        collection_id,
        start=MIN_YEAR if start is None else start,
        end=MAX_YEAR if end is None else end,
        min_span=0 if min_span is None else min_span,
        max_elements=settings.max_elements_default if max_elements is None else max_elements,
    )
    root = build_timeline_tree(timelines, common_ancestor)

    if cacheable and root is not None:
        cache.put(cache_key, root.model_dump(mode="json"), settings.cache_ttl_seconds)

    logger.info(
        "get_timelines collection_id=%s returned=%s cacheable=%s",
        collection_id,
        len(timelines),
        cacheable,
    )
    return root


# =============================================================================
# SEARCH
# =============================================================================


def search(
    db: DBSession, collection_id: UUID, search_term: str | None
) -> list[SearchResult] | None:
    """
    Case-insensitive substring search within one collection.

    Returns None for a blank term so callers can tell "no query" from "no
    matches".
    """
    if search_term is None or not search_term.strip():
        logger.warning("search_called_without_term collection_id=%s", collection_id)
        return None

    needle = search_term.upper()

    timelines = (
        db.query(Timeline)
        .filter(
            Timeline.collection_id == collection_id,
            func.upper(Timeline.title).contains(needle, autoescape=True),
        )
        .order_by(Timeline.title, Timeline.timeline_id)
        .all()
    )
    results = [
        SearchResult(id=t.timeline_id, title=t.title, object_type=ObjectType.TIMELINE)
        for t in timelines
    ]

    exhibits = (
        db.query(Exhibit)
        .filter(
            Exhibit.collection_id == collection_id,
            func.upper(Exhibit.title).contains(needle, autoescape=True),
        )
        .order_by(Exhibit.title, Exhibit.exhibit_id)
        .all()
    )
    results.extend(
        SearchResult(id=e.exhibit_id, title=e.title, object_type=ObjectType.EXHIBIT)
        for e in exhibits
    )

    content_items = (
        db.query(ContentItem)
        .filter(
            ContentItem.collection_id == collection_id,
            func.upper(ContentItem.title).contains(needle, autoescape=True)
            | func.upper(ContentItem.caption).contains(needle, autoescape=True),
        )
        .order_by(ContentItem.title, ContentItem.content_item_id)
        .all()
    )
    results.extend(
        SearchResult(
            id=c.content_item_id, title=c.title, object_type=ObjectType.CONTENT_ITEM
        )
        for c in content_items
    )

    logger.info(
        "search collection_id=%s term=%s results=%s",
        collection_id,
        search_term,
        len(results),
    )
    return results


# =============================================================================
# TOURS
# =============================================================================


def _tour_model(tour: Tour) -> TourModel:
    return TourModel(
        id=tour.tour_id,
        name=tour.name,
        category=tour.category,
        sequence=tour.sequence,
        bookmarks=[
            BookmarkModel(
                id=bookmark.bookmark_id,
                name=bookmark.name,
                url=bookmark.url,
                lag_time=bookmark.lag_time,
                description=bookmark.description,
                sequence_id=bookmark.sequence_id,
            )
            for bookmark in tour.bookmarks
        ],
    )


def get_tours(
    db: DBSession,
    cache: Cache,
    settings: ServiceSettings,
    collection_id: UUID,
) -> list[TourModel]:
    cache_key = f"Tour {collection_id}"
    payload = cache.get(cache_key)
    if payload is None:
        logger.info("get_tours_cache_miss collection_id=%s", collection_id)
        tours = storage.tours_for_collection(db, collection_id)
        payload = [_tour_model(tour).model_dump(mode="json") for tour in tours]
        cache.put(cache_key, payload, settings.cache_ttl_seconds)

    return [TourModel.model_validate(tour) for tour in payload]


# =============================================================================
# CONTENT PATHS
# =============================================================================


def _timeline_path_segments(timeline: Timeline | None) -> list[str]:
    segments = []
    while timeline is not None:
        segments.append(f"t{timeline.timeline_id}")
        timeline = timeline.parent
    return segments


def _resolve_content_path(
    db: DBSession,
    collection_id: UUID,
    reference_id: UUID | None,
    reference_title: str | None,
) -> str | None:
    def lookup(model, id_column, title_column):
        query = db.query(model).filter(model.collection_id == collection_id)
        if reference_id is not None:
            return query.filter(id_column == reference_id).first()
        return (
            query.filter(func.lower(title_column) == reference_title.lower())
            .order_by(id_column)
            .first()
        )

    timeline = lookup(Timeline, Timeline.timeline_id, Timeline.title)
    if timeline is not None:
        segments = _timeline_path_segments(timeline)
    else:
        exhibit = lookup(Exhibit, Exhibit.exhibit_id, Exhibit.title)
        if exhibit is not None:
            segments = [f"e{exhibit.exhibit_id}"] + _timeline_path_segments(
                exhibit.timeline
            )
        else:
            item = lookup(ContentItem, ContentItem.content_item_id, ContentItem.title)
            if item is None:
                return None
            segments = [
                f"c{item.content_item_id}",
                f"e{item.exhibit_id}",
            ] + _timeline_path_segments(item.exhibit.timeline)

    return "/" + "/".join(reversed(segments))


def get_content_path(
    db: DBSession,
    cache: Cache,
    settings: ServiceSettings,
    collection_id: UUID,
    reference: str,
) -> str | None:
    """
    Path from the root timeline to the node named by reference.

    The reference is either a node id or a friendly-URL title. Paths look
    like /t<id>/t<id>/e<id>/c<id>.
    """
    reference_id: UUID | None = None
    reference_title: str | None = None
    try:
        reference_id = UUID(reference)
    except ValueError:
        reference_title = friendly_url_decode(reference)

    cache_key = (
        f"ContentPath {collection_id} {reference_id or ''} {reference_title or ''}"
    )
    cached = cache.get(cache_key)
    if cached is not None:
        return cached

    path = _resolve_content_path(db, collection_id, reference_id, reference_title)
    if path is not None:
        cache.put(cache_key, path, settings.cache_ttl_seconds)
    return path


def get_service_information(settings: ServiceSettings) -> ServiceInformation:
    return ServiceInformation(thumbnails_path=settings.thumbnails_path)
