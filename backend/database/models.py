from uuid import uuid4

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Uuid,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from database.base import Base


class User(Base):
    __tablename__ = "users"

    user_id = Column(Uuid, primary_key=True, default=uuid4)
    display_name = Column(String, nullable=True, index=True)
    email = Column(String, nullable=True)
    # Null for the shared anonymous user that tracks the sandbox.
    name_identifier = Column(String, nullable=True)
    identity_provider = Column(String, nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())

    __table_args__ = (
        Index("ix_users_identity", name_identifier, identity_provider),
    )

    def __repr__(self):
        return f"<User user_id={self.user_id} display_name={self.display_name} name_identifier={self.name_identifier}>"


class SuperCollection(Base):
    __tablename__ = "super_collections"

    super_collection_id = Column(Uuid, primary_key=True)
    title = Column(String, nullable=False)
    owner_id = Column(
        Uuid, ForeignKey("users.user_id", ondelete="SET NULL"), nullable=True
    )

    owner = relationship("User")
    collections = relationship(
        "Collection",
        back_populates="super_collection",
        cascade="all, delete",
        order_by="Collection.title",
    )

    def __repr__(self):
        return f"<SuperCollection super_collection_id={self.super_collection_id} title={self.title}>"


class Collection(Base):
    """
    A named container of one timeline tree.

    The identifier is derived from the (super collection, collection) titles,
    so the title never changes once the row exists.
    """

    __tablename__ = "collections"

    collection_id = Column(Uuid, primary_key=True)
    title = Column(String, nullable=False)
    owner_id = Column(
        Uuid, ForeignKey("users.user_id", ondelete="SET NULL"), nullable=True
    )
    super_collection_id = Column(
        Uuid,
        ForeignKey("super_collections.super_collection_id", ondelete="CASCADE"),
        nullable=True,
    )

    owner = relationship("User")
    super_collection = relationship("SuperCollection", back_populates="collections")
    timelines = relationship(
        "Timeline", back_populates="collection", cascade="all, delete"
    )
    exhibits = relationship(
        "Exhibit", back_populates="collection", cascade="all, delete"
    )
    content_items = relationship(
        "ContentItem", back_populates="collection", cascade="all, delete"
    )
    tours = relationship("Tour", back_populates="collection", cascade="all, delete")

    def __repr__(self):
        return f"<Collection collection_id={self.collection_id} title={self.title} owner_id={self.owner_id}>"


class Timeline(Base):
    __tablename__ = "timelines"

    timeline_id = Column(Uuid, primary_key=True, default=uuid4)
    collection_id = Column(
        Uuid,
        ForeignKey("collections.collection_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    parent_id = Column(
        Uuid,
        ForeignKey("timelines.timeline_id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    title = Column(String, nullable=True)
    regime = Column(String, nullable=True)
    from_year = Column(Numeric(asdecimal=False), nullable=False)
    to_year = Column(Numeric(asdecimal=False), nullable=False)
    depth = Column(Integer, nullable=False, default=0)

    collection = relationship("Collection", back_populates="timelines")
    parent = relationship(
        "Timeline", remote_side=[timeline_id], back_populates="child_timelines"
    )
    child_timelines = relationship(
        "Timeline",
        back_populates="parent",
        cascade="all, delete",
        order_by="Timeline.from_year",
    )
    exhibits = relationship(
        "Exhibit",
        back_populates="timeline",
        cascade="all, delete",
        order_by="Exhibit.year",
    )

    __table_args__ = (
        Index("ix_timelines_collection_range", collection_id, from_year, to_year),
        Index("ix_timelines_collection_depth", collection_id, depth),
    )

    def __repr__(self):
        return f"<Timeline timeline_id={self.timeline_id} title={self.title} from_year={self.from_year} to_year={self.to_year} depth={self.depth}>"


class Exhibit(Base):
    __tablename__ = "exhibits"

    exhibit_id = Column(Uuid, primary_key=True, default=uuid4)
    collection_id = Column(
        Uuid,
        ForeignKey("collections.collection_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    timeline_id = Column(
        Uuid,
        ForeignKey("timelines.timeline_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title = Column(String, nullable=True)
    year = Column(Numeric(asdecimal=False), nullable=False)
    depth = Column(Integer, nullable=False, default=0)

    collection = relationship("Collection", back_populates="exhibits")
    timeline = relationship("Timeline", back_populates="exhibits")
    content_items = relationship(
        "ContentItem",
        back_populates="exhibit",
        cascade="all, delete",
        order_by="ContentItem.title",
    )

    def __repr__(self):
        return f"<Exhibit exhibit_id={self.exhibit_id} title={self.title} year={self.year}>"


class ContentItem(Base):
    __tablename__ = "content_items"

    content_item_id = Column(Uuid, primary_key=True, default=uuid4)
    collection_id = Column(
        Uuid,
        ForeignKey("collections.collection_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    exhibit_id = Column(
        Uuid,
        ForeignKey("exhibits.exhibit_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title = Column(String, nullable=True)
    caption = Column(String, nullable=True)
    media_type = Column(String, nullable=True)
    uri = Column(String, nullable=True)
    media_source = Column(String, nullable=True)
    attribution = Column(String, nullable=True)
    depth = Column(Integer, nullable=False, default=0)

    collection = relationship("Collection", back_populates="content_items")
    exhibit = relationship("Exhibit", back_populates="content_items")

    def __repr__(self):
        return f"<ContentItem content_item_id={self.content_item_id} title={self.title} media_type={self.media_type}>"


class Tour(Base):
    __tablename__ = "tours"

    tour_id = Column(Uuid, primary_key=True, default=uuid4)
    collection_id = Column(
        Uuid,
        ForeignKey("collections.collection_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(String, nullable=False)
    category = Column(String, nullable=True)
    sequence = Column(Integer, nullable=False, default=0)

    collection = relationship("Collection", back_populates="tours")
    bookmarks = relationship(
        "Bookmark",
        back_populates="tour",
        cascade="all, delete",
        order_by="Bookmark.sequence_id",
    )

    def __repr__(self):
        return f"<Tour tour_id={self.tour_id} name={self.name}>"


class Bookmark(Base):
    __tablename__ = "bookmarks"

    bookmark_id = Column(Uuid, primary_key=True, default=uuid4)
    tour_id = Column(
        Uuid, ForeignKey("tours.tour_id", ondelete="CASCADE"), nullable=False
    )
    name = Column(String, nullable=True)
    url = Column(String, nullable=True)
    lag_time = Column(Integer, nullable=True)
    description = Column(String, nullable=True)
    sequence_id = Column(Integer, nullable=False, default=0)

    tour = relationship("Tour", back_populates="bookmarks")

    def __repr__(self):
        return f"<Bookmark bookmark_id={self.bookmark_id} name={self.name} sequence_id={self.sequence_id}>"
