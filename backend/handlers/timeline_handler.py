"""
Timeline Handler - REST API endpoints for timeline mutations.

Requests without a body are rejected with RequestBodyEmpty. Rejections come
back as:
{
    "detail": {
        "error": "<ErrorKind>",
        "message": "<description>"
    }
}
"""

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from database.base import get_db
from dependencies.auth import get_optional_identity
from handlers.errors import handle_tree_error
from models.api_models import DeleteResponse, EntityReference, MutationResponse, TimelineRequest
from operators.access_operator import Identity
from operators.timeline_operator import delete_timeline, put_timeline

router = APIRouter(prefix="/api/{super_collection}/{collection}/timeline", tags=["timelines"])


@router.put("", response_model=MutationResponse)
def timeline_put(
    super_collection: str,
    collection: str,
    request: TimelineRequest | None = Body(default=None),
    db: Session = Depends(get_db),
    identity: Identity | None = Depends(get_optional_identity),
):
    """
    Create a timeline (no id) or update one in place (id given).

    The range must nest inside the parent timeline's range.
    """
    try:
        timeline_id = put_timeline(db, identity, super_collection, collection, request)
    except Exception as e:
        handle_tree_error(e, db)

    return MutationResponse(ok=True, id=timeline_id)


@router.delete("", response_model=DeleteResponse)
def timeline_delete(
    super_collection: str,
    collection: str,
    request: EntityReference | None = Body(default=None),
    db: Session = Depends(get_db),
    identity: Identity | None = Depends(get_optional_identity),
):
    """Delete a timeline with its sub-timelines, exhibits and content items."""
    try:
        delete_timeline(db, identity, super_collection, collection, request)
    except Exception as e:
        handle_tree_error(e, db)

    return DeleteResponse(ok=True)
