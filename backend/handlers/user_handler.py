from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from database.base import get_db
from dependencies.auth import get_optional_identity
from dependencies.services import get_settings
from handlers.errors import handle_tree_error
from models.api_models import (
    DeleteResponse,
    UserCollectionResponse,
    UserRequest,
    UserResponse,
)
from operators.access_operator import Identity
from operators.user_operator import delete_user, get_user, put_user
from settings import ServiceSettings

router = APIRouter(prefix="/api/user", tags=["users"])


@router.put("", response_model=UserCollectionResponse)
def user_put(
    request: UserRequest | None = Body(default=None),
    db: Session = Depends(get_db),
    settings: ServiceSettings = Depends(get_settings),
    identity: Identity | None = Depends(get_optional_identity),
):
    """
    Create or update the caller's user.

    Returns the URI of the caller's personal collection, or of the sandbox
    for anonymous callers.
    """
    try:
        uri = put_user(db, settings, identity, request)
    except Exception as e:
        handle_tree_error(e, db)

    return UserCollectionResponse(ok=True, collection_uri=uri)


@router.delete("", response_model=DeleteResponse)
def user_delete(
    request: UserRequest | None = Body(default=None),
    db: Session = Depends(get_db),
    identity: Identity | None = Depends(get_optional_identity),
):
    try:
        delete_user(db, identity, request)
    except Exception as e:
        handle_tree_error(e, db)

    return DeleteResponse(ok=True)


@router.get("", response_model=UserResponse)
def user_get(
    db: Session = Depends(get_db),
    identity: Identity | None = Depends(get_optional_identity),
):
    try:
        user = get_user(db, identity)
    except Exception as e:
        handle_tree_error(e, db)

    return UserResponse(
        user_id=user.user_id,
        display_name=user.display_name,
        email=user.email,
        name_identifier=user.name_identifier,
        identity_provider=user.identity_provider,
    )
