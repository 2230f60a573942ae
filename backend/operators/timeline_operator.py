"""
Timeline Operator - create, update and delete timelines.

Every call runs all of its checks before touching the session and commits
once at the end, so a rejected request leaves nothing behind:

- Create: parent must exist in the same collection (absent parent = root),
  depth is parent depth + 1, range must nest inside the parent.
- Update: node must exist in the request's collection, range is checked
  against the parent as stored, never re-parented.
- Delete: removes the subtree of timelines, exhibits and content items.
"""

import logging
from uuid import UUID, uuid4

from sqlalchemy.orm import Session as DBSession

from database import storage
from database.models import Collection, Timeline
from models.api_models import EntityReference, TimelineRequest
from operators.access_operator import Identity
from operators.collection_operator import require_writable_collection
from operators.errors import (
    CollectionMismatchError,
    ErrorKind,
    NotFoundError,
    RequestBodyEmptyError,
    TimelineRangeError,
)
from operators.range_validator import validate_timeline_range

logger = logging.getLogger(__name__)


def _create_timeline(
    db: DBSession, collection: Collection, request: TimelineRequest
) -> Timeline:
    parent = None
    if request.parent_id is not None:
        parent = storage.find_timeline(db, request.parent_id)
        if parent is None or parent.collection_id != collection.collection_id:
            raise NotFoundError(ErrorKind.PARENT_TIMELINE_NOT_FOUND, request.parent_id)

    if not validate_timeline_range(parent, request.from_year, request.to_year):
        raise TimelineRangeError(request.from_year, request.to_year)

    timeline = Timeline(
        timeline_id=uuid4(),
        collection_id=collection.collection_id,
        title=request.title,
        regime=request.regime,
        from_year=request.from_year,
        to_year=request.to_year,
        depth=0 if parent is None else parent.depth + 1,
    )

    if parent is not None:
        storage.ensure_children_loaded(parent, "child_timelines")
        parent.child_timelines.append(timeline)

    db.add(timeline)
    return timeline


def _update_timeline(
    db: DBSession, collection: Collection, request: TimelineRequest
) -> Timeline:
    timeline = storage.find_timeline(db, request.id)
    if timeline is None:
        raise NotFoundError(ErrorKind.TIMELINE_NOT_FOUND, request.id)

    if timeline.collection_id != collection.collection_id:
        raise CollectionMismatchError()

    parent = storage.get_parent_timeline(db, timeline.timeline_id)
    if not validate_timeline_range(parent, request.from_year, request.to_year):
        raise TimelineRangeError(request.from_year, request.to_year)

    timeline.title = request.title
    timeline.regime = request.regime
    timeline.from_year = request.from_year
    timeline.to_year = request.to_year
    return timeline


def put_timeline(
    db: DBSession,
    identity: Identity | None,
    super_collection: str,
    collection_name: str,
    request: TimelineRequest | None,
) -> UUID:
    """
    Create a timeline when the request has no id, otherwise update it in place.

    Returns:
        The timeline id.

    Raises:
        TreeError: with the kind of the first failed check. Nothing is written.
    """
    if request is None:
        raise RequestBodyEmptyError()

    collection = require_writable_collection(db, identity, super_collection, collection_name)

    if request.id is None:
        timeline = _create_timeline(db, collection, request)
        event = "timeline_created"
    else:
        timeline = _update_timeline(db, collection, request)
        event = "timeline_updated"

    timeline_id = timeline.timeline_id
    depth = timeline.depth
    db.commit()

    logger.info(
        "%s timeline_id=%s collection_id=%s depth=%s",
        event,
        timeline_id,
        collection.collection_id,
        depth,
    )
    return timeline_id


def delete_timeline(
    db: DBSession,
    identity: Identity | None,
    super_collection: str,
    collection_name: str,
    request: EntityReference | None,
) -> None:
    if request is None:
        raise RequestBodyEmptyError()

    collection = require_writable_collection(db, identity, super_collection, collection_name)

    if request.id is None:
        raise NotFoundError(ErrorKind.TIMELINE_NOT_FOUND)

    timeline = storage.find_timeline(db, request.id)
    if timeline is None:
        raise NotFoundError(ErrorKind.TIMELINE_NOT_FOUND, request.id)

    if timeline.collection_id != collection.collection_id:
        raise CollectionMismatchError()

    db.delete(timeline)
    db.commit()
    logger.info(
        "timeline_deleted timeline_id=%s collection_id=%s",
        request.id,
        collection.collection_id,
    )
