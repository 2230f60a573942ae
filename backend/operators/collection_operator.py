import logging
from uuid import UUID

from sqlalchemy.orm import Session as DBSession

from database import storage
from database.models import Collection, SuperCollection
from models.api_models import CollectionRequest
from operators.access_operator import Identity, can_modify_collection, is_owner
from operators.errors import (
    AuthorizationError,
    ErrorKind,
    NotFoundError,
    RequestBodyEmptyError,
    TreeError,
)
from utils.identity import derive_collection_id, derive_id

logger = logging.getLogger(__name__)


def require_writable_collection(
    db: DBSession,
    identity: Identity | None,
    super_collection: str,
    collection_name: str,
) -> Collection:
    """Look up the collection named by URL segments and check the caller may change it."""
    collection_id = derive_collection_id(super_collection, collection_name)
    collection = storage.find_collection(db, collection_id)
    if collection is None:
        raise NotFoundError(ErrorKind.COLLECTION_NOT_FOUND, collection_id)

    if not can_modify_collection(identity, collection):
        logger.warning(
            "collection_write_denied collection_id=%s identity=%s",
            collection_id,
            identity.cache_key if identity else "anonymous",
        )
        raise AuthorizationError()

    return collection


def put_collection_name(
    db: DBSession,
    identity: Identity | None,
    super_collection_title: str,
    collection_title: str,
    request: CollectionRequest | None,
) -> UUID:
    """
    Create a collection (and its super collection) owned by the caller.

    Existing collections keep their title: the identifier and external links
    are derived from it. A body title is only used for display casing when it
    derives to the same identifier as the URL segment.
    """
    if request is None:
        raise RequestBodyEmptyError()
    if identity is None:
        raise TreeError(ErrorKind.UNAUTHENTICATED)

    user = storage.find_user_by_identity(
        db, identity.name_identifier, identity.identity_provider
    )
    if user is None:
        raise NotFoundError(ErrorKind.USER_NOT_FOUND)

    super_collection_id = derive_id(super_collection_title)
    super_collection = storage.find_super_collection(db, super_collection_id)
    if super_collection is not None and not is_owner(identity, super_collection.owner):
        raise AuthorizationError()

    collection_id = derive_collection_id(super_collection_title, collection_title)
    collection = storage.find_collection(db, collection_id)
    if collection is not None:
        if not is_owner(identity, collection.owner):
            raise AuthorizationError()
        logger.info("collection_exists collection_id=%s", collection_id)
        return collection_id

    if super_collection is None:
        super_collection = SuperCollection(
            super_collection_id=super_collection_id,
            title=super_collection_title,
            owner=user,
        )
        db.add(super_collection)

    title = collection_title
    if request.title and derive_collection_id(super_collection_title, request.title) == collection_id:
        title = request.title

    collection = Collection(
        collection_id=collection_id,
        title=title,
        owner=user,
        super_collection=super_collection,
    )
    db.add(collection)
    db.commit()

    logger.info(
        "collection_created collection_id=%s super_collection=%s title=%s",
        collection_id,
        super_collection_title,
        title,
    )
    return collection_id


def delete_collection(
    db: DBSession,
    identity: Identity | None,
    super_collection_title: str,
    collection_title: str,
) -> None:
    collection_id = derive_collection_id(super_collection_title, collection_title)
    collection = storage.find_collection(db, collection_id)
    if collection is None:
        raise NotFoundError(ErrorKind.COLLECTION_NOT_FOUND, collection_id)

    # Unowned sandbox collections cannot be deleted through the API.
    if not is_owner(identity, collection.owner):
        raise AuthorizationError()

    db.delete(collection)
    db.commit()
    logger.info("collection_deleted collection_id=%s", collection_id)
