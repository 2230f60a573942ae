import logging
from uuid import uuid4

from sqlalchemy.orm import Session as DBSession

from database import storage
from database.models import Collection, SuperCollection, Timeline, User
from models.api_models import UserRequest
from operators.access_operator import Identity, is_owner
from operators.errors import (
    AuthorizationError,
    ErrorKind,
    NotFoundError,
    RequestBodyEmptyError,
    TreeError,
)
from settings import MAX_YEAR, MIN_YEAR, ServiceSettings
from utils.identity import derive_collection_id, derive_id, friendly_url_replacements

logger = logging.getLogger(__name__)

ROOT_TIMELINE_TITLE = "Cosmos"


def collection_uri(super_collection_title: str, collection_title: str) -> str:
    return (
        f"/{friendly_url_replacements(super_collection_title)}"
        f"/{friendly_url_replacements(collection_title)}/"
    )


def ensure_personal_collection(db: DBSession, user: User) -> str:
    """
    Find or stage the caller's personal super collection.

    A new one comes with a personal collection of the same title and a root
    "Cosmos" timeline spanning the full supported year range. Nothing is
    committed here.
    """
    super_collection = storage.find_super_collection_for_identity(
        db, user.name_identifier, user.identity_provider
    )
    if super_collection is not None:
        return collection_uri(super_collection.title, super_collection.title)

    title = user.display_name
    super_collection_id = derive_id(title)
    if storage.find_super_collection(db, super_collection_id) is not None:
        # Title already taken by a super collection of another identity.
        raise AuthorizationError()

    super_collection = SuperCollection(
        super_collection_id=super_collection_id,
        title=title,
        owner=user,
    )
    personal_collection = Collection(
        collection_id=derive_collection_id(title, title),
        title=title,
        owner=user,
        super_collection=super_collection,
    )
    root_timeline = Timeline(
        timeline_id=uuid4(),
        collection=personal_collection,
        title=ROOT_TIMELINE_TITLE,
        regime=ROOT_TIMELINE_TITLE,
        from_year=MIN_YEAR,
        to_year=MAX_YEAR,
        depth=0,
    )
    db.add_all([super_collection, personal_collection, root_timeline])

    logger.info(
        "personal_collection_created super_collection_id=%s title=%s",
        super_collection_id,
        title,
    )
    return collection_uri(title, title)


def _put_anonymous_user(db: DBSession, settings: ServiceSettings) -> str:
    sandbox = storage.find_super_collection_by_title(db, settings.sandbox_super_collection)
    if sandbox is None:
        raise NotFoundError(ErrorKind.SANDBOX_SUPER_COLLECTION_NOT_FOUND)

    if storage.find_anonymous_user(db) is None:
        db.add(User(user_id=uuid4(), display_name=settings.anonymous_display_name))
        db.commit()
        logger.info("anonymous_user_created")

    return collection_uri(sandbox.title, settings.sandbox_collection)


def put_user(
    db: DBSession,
    settings: ServiceSettings,
    identity: Identity | None,
    request: UserRequest | None,
) -> str:
    """
    Create or update the caller's user and make sure its personal collection exists.

    Anonymous callers manage the single shared anonymous user and get the
    sandbox collection back. Returns the URI of the caller's collection.
    """
    if request is None:
        raise RequestBodyEmptyError()

    if identity is None:
        return _put_anonymous_user(db, settings)

    if not request.display_name:
        raise RequestBodyEmptyError(message="display_name is required")

    existing = storage.find_user_by_identity(
        db, identity.name_identifier, identity.identity_provider
    )
    if existing is None:
        if request.id is not None:
            raise NotFoundError(ErrorKind.USER_NOT_FOUND, request.id)
        holder = storage.find_user_by_display_name(db, request.display_name)
        if holder is not None:
            raise AuthorizationError()
        user = User(
            user_id=uuid4(),
            display_name=request.display_name,
            email=request.email,
            name_identifier=identity.name_identifier,
            identity_provider=identity.identity_provider,
        )
        db.add(user)
        event = "user_created"
    else:
        if request.id is not None and request.id != existing.user_id:
            raise NotFoundError(ErrorKind.USER_NOT_FOUND, request.id)
        # The display name keys the personal collection, so only the email changes.
        existing.email = request.email
        user = existing
        event = "user_updated"

    uri = ensure_personal_collection(db, user)
    db.commit()

    logger.info("%s display_name=%s collection_uri=%s", event, user.display_name, uri)
    return uri


def delete_user(
    db: DBSession,
    identity: Identity | None,
    request: UserRequest | None,
) -> None:
    """Delete a user together with every collection and super collection it owns."""
    if request is None:
        raise RequestBodyEmptyError()
    if identity is None:
        raise TreeError(ErrorKind.UNAUTHENTICATED)

    user = storage.find_user_by_display_name(db, request.display_name)
    if user is None:
        raise NotFoundError(ErrorKind.USER_NOT_FOUND)
    if not is_owner(identity, user):
        raise AuthorizationError()

    title = user.display_name
    # Owner links are nulled on delete, and unowned rows are writable by anyone.
    collections = storage.collections_owned_by(db, user.user_id)
    super_collections = storage.super_collections_owned_by(db, user.user_id)
    for owned in (*collections, *super_collections):
        db.delete(owned)
    db.delete(user)
    db.commit()

    logger.info(
        "user_deleted display_name=%s collections=%s super_collections=%s",
        title,
        len(collections),
        len(super_collections),
    )


def get_user(db: DBSession, identity: Identity | None) -> User:
    """Stored user for the caller, or an unsaved one carrying just the identity."""
    if identity is None:
        raise TreeError(ErrorKind.UNAUTHENTICATED)

    user = storage.find_user_by_identity(
        db, identity.name_identifier, identity.identity_provider
    )
    if user is not None:
        return user

    return User(
        name_identifier=identity.name_identifier,
        identity_provider=identity.identity_provider,
    )
