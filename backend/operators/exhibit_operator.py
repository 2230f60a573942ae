"""
Exhibit Operator - exhibits and the content items they own.

Exhibit writes carry their content items along: a new exhibit creates every
nested item, an updated exhibit updates items that have an id and creates
the rest. All lookups for a call happen before its first change, and each
call commits once. Thumbnails are requested after the commit; a failure
there never undoes the write.
"""

import logging
from collections.abc import Callable
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy.orm import Session as DBSession

from database import storage
from database.models import Collection, ContentItem, Exhibit
from models.api_models import (
    ContentItemRequest,
    EntityReference,
    ExhibitRequest,
    PutExhibitResult,
)
from operators.access_operator import Identity
from operators.collection_operator import require_writable_collection
from operators.errors import (
    CollectionMismatchError,
    ErrorKind,
    NotFoundError,
    RequestBodyEmptyError,
)
from utils.thumbnails import ThumbnailGenerator

logger = logging.getLogger(__name__)


def _find_in_collection(
    db: DBSession,
    collection: Collection,
    finder: Callable[[DBSession, UUID], Any],
    entity_id: UUID | None,
    not_found: ErrorKind,
):
    if entity_id is None:
        raise NotFoundError(not_found)

    entity = finder(db, entity_id)

    if entity is None:
        raise NotFoundError(not_found, entity_id)
    if entity.collection_id != collection.collection_id:
        raise CollectionMismatchError()
    return entity


def _apply_content_item_fields(item: ContentItem, request: ContentItemRequest) -> None:
    item.title = request.title
    item.caption = request.caption
    item.media_type = request.media_type
    item.uri = request.uri
    item.media_source = request.media_source
    item.attribution = request.attribution


def _add_content_item(
    db: DBSession,
    collection: Collection,
    exhibit: Exhibit,
    request: ContentItemRequest,
) -> ContentItem:
    item = ContentItem(
        content_item_id=uuid4(),
        collection_id=collection.collection_id,
        depth=exhibit.depth + 1,
    )
    _apply_content_item_fields(item, request)

    storage.ensure_children_loaded(exhibit, "content_items")
    exhibit.content_items.append(item)
    db.add(item)
    return item


def _request_thumbnails(thumbnails: ThumbnailGenerator, items: list[ContentItem]) -> None:
    for item in items:
        try:
            thumbnails.create_thumbnails(item)
        except Exception:
            logger.exception(
                "thumbnail_request_failed content_item_id=%s", item.content_item_id
            )


# =============================================================================
# EXHIBITS
# =============================================================================


def put_exhibit(
    db: DBSession,
    identity: Identity | None,
    super_collection: str,
    collection_name: str,
    request: ExhibitRequest | None,
    thumbnails: ThumbnailGenerator,
) -> PutExhibitResult:
    if request is None:
        raise RequestBodyEmptyError()

    collection = require_writable_collection(db, identity, super_collection, collection_name)
    item_requests = request.content_items or []
    written: list[ContentItem] = []

    if request.id is None:
        parent = None
        if request.timeline_id is not None:
            parent = storage.find_timeline(db, request.timeline_id)
        if parent is None or parent.collection_id != collection.collection_id:
            raise NotFoundError(ErrorKind.PARENT_TIMELINE_NOT_FOUND, request.timeline_id)

        exhibit = Exhibit(
            exhibit_id=uuid4(),
            collection_id=collection.collection_id,
            title=request.title,
            year=request.year,
            depth=parent.depth + 1,
        )
        storage.ensure_children_loaded(parent, "exhibits")
        parent.exhibits.append(exhibit)
        db.add(exhibit)

        for item_request in item_requests:
            written.append(_add_content_item(db, collection, exhibit, item_request))
        event = "exhibit_created"
    else:
        exhibit = _find_in_collection(
            db, collection, storage.find_exhibit, request.id, ErrorKind.EXHIBIT_NOT_FOUND
        )
        existing_items = {}
        for item_request in item_requests:
            if item_request.id is None:
                continue
            item = _find_in_collection(
                db,
                collection,
                storage.find_content_item,
                item_request.id,
                ErrorKind.CONTENT_ITEM_NOT_FOUND,
            )
            # Only items already under this exhibit are updated through it.
            if item.exhibit_id != exhibit.exhibit_id:
                raise NotFoundError(ErrorKind.CONTENT_ITEM_NOT_FOUND, item_request.id)
            existing_items[item_request.id] = item

        exhibit.title = request.title
        exhibit.year = request.year
        for item_request in item_requests:
            if item_request.id is None:
                written.append(_add_content_item(db, collection, exhibit, item_request))
            else:
                item = existing_items[item_request.id]
                _apply_content_item_fields(item, item_request)
                written.append(item)
        event = "exhibit_updated"

    result = PutExhibitResult(
        exhibit_id=exhibit.exhibit_id,
        content_item_ids=[item.content_item_id for item in written],
    )
    db.commit()

    logger.info(
        "%s exhibit_id=%s collection_id=%s content_items=%s",
        event,
        result.exhibit_id,
        collection.collection_id,
        len(result.content_item_ids),
    )
    _request_thumbnails(thumbnails, written)
    return result


def delete_exhibit(
    db: DBSession,
    identity: Identity | None,
    super_collection: str,
    collection_name: str,
    request: EntityReference | None,
) -> None:
    if request is None:
        raise RequestBodyEmptyError()

    collection = require_writable_collection(db, identity, super_collection, collection_name)
    exhibit = _find_in_collection(
        db, collection, storage.find_exhibit, request.id, ErrorKind.EXHIBIT_NOT_FOUND
    )

    db.delete(exhibit)
    db.commit()
    logger.info(
        "exhibit_deleted exhibit_id=%s collection_id=%s",
        request.id,
        collection.collection_id,
    )


# =============================================================================
# CONTENT ITEMS
# =============================================================================


def put_content_item(
    db: DBSession,
    identity: Identity | None,
    super_collection: str,
    collection_name: str,
    request: ContentItemRequest | None,
    thumbnails: ThumbnailGenerator,
) -> UUID:
    if request is None:
        raise RequestBodyEmptyError()

    collection = require_writable_collection(db, identity, super_collection, collection_name)

    if request.id is None:
        parent = None
        if request.exhibit_id is not None:
            parent = storage.find_exhibit(db, request.exhibit_id)
        if parent is None or parent.collection_id != collection.collection_id:
            raise NotFoundError(ErrorKind.PARENT_EXHIBIT_NOT_FOUND, request.exhibit_id)

        item = _add_content_item(db, collection, parent, request)
        event = "content_item_created"
    else:
        item = _find_in_collection(
            db, collection, storage.find_content_item, request.id, ErrorKind.CONTENT_ITEM_NOT_FOUND
        )
        _apply_content_item_fields(item, request)
        event = "content_item_updated"

    content_item_id = item.content_item_id
    db.commit()

    logger.info(
        "%s content_item_id=%s collection_id=%s",
        event,
        content_item_id,
        collection.collection_id,
    )
    _request_thumbnails(thumbnails, [item])
    return content_item_id


def delete_content_item(
    db: DBSession,
    identity: Identity | None,
    super_collection: str,
    collection_name: str,
    request: EntityReference | None,
) -> None:
    if request is None:
        raise RequestBodyEmptyError()

    collection = require_writable_collection(db, identity, super_collection, collection_name)
    item = _find_in_collection(
        db, collection, storage.find_content_item, request.id, ErrorKind.CONTENT_ITEM_NOT_FOUND
    )

    db.delete(item)
    db.commit()
    logger.info(
        "content_item_deleted content_item_id=%s collection_id=%s",
        request.id,
        collection.collection_id,
    )
