from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from database.base import get_db
from dependencies.auth import get_optional_identity
from dependencies.services import get_thumbnail_generator
from handlers.errors import handle_tree_error
from models.api_models import (
    ContentItemRequest,
    DeleteResponse,
    EntityReference,
    ExhibitRequest,
    MutationResponse,
    PutExhibitResult,
)
from operators.access_operator import Identity
from operators.exhibit_operator import (
    delete_content_item,
    delete_exhibit,
    put_content_item,
    put_exhibit,
)
from utils.thumbnails import ThumbnailGenerator

router = APIRouter(prefix="/api/{super_collection}/{collection}", tags=["exhibits"])


@router.put("/exhibit", response_model=PutExhibitResult)
def exhibit_put(
    super_collection: str,
    collection: str,
    request: ExhibitRequest | None = Body(default=None),
    db: Session = Depends(get_db),
    identity: Identity | None = Depends(get_optional_identity),
    thumbnails: ThumbnailGenerator = Depends(get_thumbnail_generator),
):
    """Create or update an exhibit together with its content items."""
    try:
        return put_exhibit(db, identity, super_collection, collection, request, thumbnails)
    except Exception as e:
        handle_tree_error(e, db)


@router.delete("/exhibit", response_model=DeleteResponse)
def exhibit_delete(
    super_collection: str,
    collection: str,
    request: EntityReference | None = Body(default=None),
    db: Session = Depends(get_db),
    identity: Identity | None = Depends(get_optional_identity),
):
    try:
        delete_exhibit(db, identity, super_collection, collection, request)
    except Exception as e:
        handle_tree_error(e, db)

    return DeleteResponse(ok=True)


@router.put("/contentitem", response_model=MutationResponse)
def content_item_put(
    super_collection: str,
    collection: str,
    request: ContentItemRequest | None = Body(default=None),
    db: Session = Depends(get_db),
    identity: Identity | None = Depends(get_optional_identity),
    thumbnails: ThumbnailGenerator = Depends(get_thumbnail_generator),
):
    try:
        content_item_id = put_content_item(
            db, identity, super_collection, collection, request, thumbnails
        )
    except Exception as e:
        handle_tree_error(e, db)

    return MutationResponse(ok=True, id=content_item_id)


@router.delete("/contentitem", response_model=DeleteResponse)
def content_item_delete(
    super_collection: str,
    collection: str,
    request: EntityReference | None = Body(default=None),
    db: Session = Depends(get_db),
    identity: Identity | None = Depends(get_optional_identity),
):
    try:
        delete_content_item(db, identity, super_collection, collection, request)
    except Exception as e:
        handle_tree_error(e, db)

    return DeleteResponse(ok=True)
