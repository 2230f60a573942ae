from uuid import uuid4

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database.base import Base
from database.models import (
    Bookmark,
    Collection,
    ContentItem,
    Exhibit,
    SuperCollection,
    Timeline,
    Tour,
    User,
)
from operators.access_operator import Identity
from settings import ServiceSettings
from utils.cache import MemoryCache
from utils.identity import derive_collection_id, derive_id


class TreeFactory:
    """Seeds rows straight through the ORM, bypassing operator checks."""

    def __init__(self, db):
        self.db = db

    def user(self, identity: Identity | None, display_name: str | None = None) -> User:
        user = User(
            user_id=uuid4(),
            display_name=display_name,
            name_identifier=identity.name_identifier if identity else None,
            identity_provider=identity.identity_provider if identity else None,
        )
        self.db.add(user)
        self.db.commit()
        return user

    def collection(
        self,
        super_title: str,
        title: str | None = None,
        owner: User | None = None,
    ) -> Collection:
        title = title or super_title
        super_collection = self.db.get(SuperCollection, derive_id(super_title))
        if super_collection is None:
            super_collection = SuperCollection(
                super_collection_id=derive_id(super_title),
                title=super_title,
                owner=owner,
            )
            self.db.add(super_collection)

        collection = Collection(
            collection_id=derive_collection_id(super_title, title),
            title=title,
            owner=owner,
            super_collection=super_collection,
        )
        self.db.add(collection)
        self.db.commit()
        return collection

    def timeline(
        self,
        collection: Collection,
        title: str,
        from_year: float,
        to_year: float,
        parent: Timeline | None = None,
    ) -> Timeline:
        timeline = Timeline(
            timeline_id=uuid4(),
            collection_id=collection.collection_id,
            parent_id=parent.timeline_id if parent else None,
            title=title,
            regime=None,
            from_year=from_year,
            to_year=to_year,
            depth=parent.depth + 1 if parent else 0,
        )
        self.db.add(timeline)
        self.db.commit()
        return timeline

    def exhibit(self, timeline: Timeline, title: str, year: float) -> Exhibit:
        exhibit = Exhibit(
            exhibit_id=uuid4(),
            collection_id=timeline.collection_id,
            timeline_id=timeline.timeline_id,
            title=title,
            year=year,
            depth=timeline.depth + 1,
        )
        self.db.add(exhibit)
        self.db.commit()
        return exhibit

    def content_item(
        self,
        exhibit: Exhibit,
        title: str,
        caption: str | None = None,
        uri: str | None = None,
    ) -> ContentItem:
        item = ContentItem(
            content_item_id=uuid4(),
            collection_id=exhibit.collection_id,
            exhibit_id=exhibit.exhibit_id,
            title=title,
            caption=caption,
            media_type="image",
            uri=uri,
            depth=exhibit.depth + 1,
        )
        self.db.add(item)
        self.db.commit()
        return item

    def tour(self, collection: Collection, name: str, sequence: int, bookmarks=()) -> Tour:
        tour = Tour(
            tour_id=uuid4(),
            collection_id=collection.collection_id,
            name=name,
            sequence=sequence,
        )
        for index, bookmark_name in enumerate(bookmarks):
            tour.bookmarks.append(
                Bookmark(bookmark_id=uuid4(), name=bookmark_name, sequence_id=index)
            )
        self.db.add(tour)
        self.db.commit()
        return tour


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def tree(db):
    return TreeFactory(db)


@pytest.fixture
def cache():
    return MemoryCache(default_ttl=300)


@pytest.fixture
def settings():
    return ServiceSettings(database_url="sqlite://", thumbnails_enabled=False)


class _FakeThumbnails:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.items = []

    def create_thumbnails(self, content_item):
        self.items.append(content_item.content_item_id)
        if self.fail:
            raise RuntimeError("queue unavailable")


@pytest.fixture
def thumbnails():
    return _FakeThumbnails()
