from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from database.base import get_db
from dependencies.auth import get_optional_identity
from handlers.errors import handle_tree_error
from models.api_models import CollectionRequest, DeleteResponse, MutationResponse
from operators.access_operator import Identity
from operators.collection_operator import delete_collection, put_collection_name

router = APIRouter(prefix="/api", tags=["collections"])


@router.put("/{super_collection}/{collection}", response_model=MutationResponse)
def collection_put(
    super_collection: str,
    collection: str,
    request: CollectionRequest | None = Body(default=None),
    db: Session = Depends(get_db),
    identity: Identity | None = Depends(get_optional_identity),
):
    """Create a collection owned by the caller, or confirm the caller owns it."""
    try:
        collection_id = put_collection_name(
            db, identity, super_collection, collection, request
        )
    except Exception as e:
        handle_tree_error(e, db)

    return MutationResponse(ok=True, id=collection_id)


@router.delete("/{super_collection}/{collection}", response_model=DeleteResponse)
def collection_delete(
    super_collection: str,
    collection: str,
    db: Session = Depends(get_db),
    identity: Identity | None = Depends(get_optional_identity),
):
    try:
        delete_collection(db, identity, super_collection, collection)
    except Exception as e:
        handle_tree_error(e, db)

    return DeleteResponse(ok=True)
