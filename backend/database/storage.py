"""
Store boundary for the timeline tree.

Thin query helpers over the SQLAlchemy session. Operators call these for
lookups and for the range query behind GetTimelines; adds, deletes and the
single commit per request stay in the operators.
"""

from uuid import UUID

from sqlalchemy import inspect, select
from sqlalchemy.orm import Session as DBSession, selectinload

from database.models import (
    Collection,
    ContentItem,
    Exhibit,
    SuperCollection,
    Timeline,
    Tour,
    User,
)


def find_collection(db: DBSession, collection_id: UUID) -> Collection | None:
    return (
        db.query(Collection)
        .filter(Collection.collection_id == collection_id)
        .first()
    )


def find_super_collection(
    db: DBSession, super_collection_id: UUID
) -> SuperCollection | None:
    return (
        db.query(SuperCollection)
        .filter(SuperCollection.super_collection_id == super_collection_id)
        .first()
    )


def find_super_collection_by_title(db: DBSession, title: str) -> SuperCollection | None:
    return db.query(SuperCollection).filter(SuperCollection.title == title).first()


def first_super_collection(db: DBSession) -> SuperCollection | None:
    return db.query(SuperCollection).order_by(SuperCollection.title).first()


def find_timeline(db: DBSession, timeline_id: UUID) -> Timeline | None:
    return db.query(Timeline).filter(Timeline.timeline_id == timeline_id).first()


def find_exhibit(db: DBSession, exhibit_id: UUID) -> Exhibit | None:
    return db.query(Exhibit).filter(Exhibit.exhibit_id == exhibit_id).first()


def find_content_item(db: DBSession, content_item_id: UUID) -> ContentItem | None:
    return (
        db.query(ContentItem)
        .filter(ContentItem.content_item_id == content_item_id)
        .first()
    )


def find_user_by_identity(
    db: DBSession, name_identifier: str, identity_provider: str | None
) -> User | None:
    return (
        db.query(User)
        .filter(
            User.name_identifier == name_identifier,
            User.identity_provider == identity_provider,
        )
        .first()
    )


def find_user_by_display_name(db: DBSession, display_name: str | None) -> User | None:
    return db.query(User).filter(User.display_name == display_name).first()


def find_anonymous_user(db: DBSession) -> User | None:
    return db.query(User).filter(User.name_identifier.is_(None)).first()


def get_parent_timeline(db: DBSession, timeline_id: UUID) -> Timeline | None:
    """Read the stored parent of a timeline, independent of any in-memory edits."""
    parent_id = (
        select(Timeline.parent_id)
        .where(Timeline.timeline_id == timeline_id)
        .scalar_subquery()
    )
    return db.query(Timeline).filter(Timeline.timeline_id == parent_id).first()


def ensure_children_loaded(node, attribute: str) -> None:
    """Fully load a child collection before anything is appended to it."""
    state = inspect(node)
    if state.persistent and attribute in state.unloaded:
        # Reading the attribute runs its lazy loader.
        getattr(node, attribute)


def timelines_query(
    db: DBSession,
    collection_id: UUID,
    start: float,
    end: float,
    min_span: float,
    max_elements: int,
) -> list[Timeline]:
    """
    Timelines of a collection intersecting [start, end] with at least min_span.

    Rows come back shallowest first, ties broken by identifier, and are cut at
    max_elements so deeper levels are the ones truncated. Exhibits and their
    content items are loaded with the rows.
    """
    if max_elements <= 0:
        return []

    return (
        db.query(Timeline)
        .options(selectinload(Timeline.exhibits).selectinload(Exhibit.content_items))
        .filter(
            Timeline.collection_id == collection_id,
            Timeline.to_year >= start,
            Timeline.from_year <= end,
            (Timeline.to_year - Timeline.from_year) >= min_span,
        )
        .order_by(Timeline.depth, Timeline.timeline_id)
        .limit(max_elements)
        .all()
    )


def tours_for_collection(db: DBSession, collection_id: UUID) -> list[Tour]:
    return (
        db.query(Tour)
        .options(selectinload(Tour.bookmarks))
        .filter(Tour.collection_id == collection_id)
        .order_by(Tour.sequence, Tour.name)
        .all()
    )


def first_collection_of(db: DBSession, super_collection: SuperCollection) -> Collection | None:
    return (
        db.query(Collection)
        .filter(Collection.super_collection_id == super_collection.super_collection_id)
        .order_by(Collection.title)
        .first()
    )


def find_super_collection_for_identity(
    db: DBSession, name_identifier: str, identity_provider: str | None
) -> SuperCollection | None:
    return (
        db.query(SuperCollection)
        .join(User, SuperCollection.owner)
        .filter(
            User.name_identifier == name_identifier,
            User.identity_provider == identity_provider,
        )
        .first()
    )


def collections_owned_by(db: DBSession, user_id: UUID) -> list[Collection]:
    return db.query(Collection).filter(Collection.owner_id == user_id).all()


def super_collections_owned_by(db: DBSession, user_id: UUID) -> list[SuperCollection]:
    return (
        db.query(SuperCollection).filter(SuperCollection.owner_id == user_id).all()
    )
