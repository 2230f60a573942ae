import logging
from typing import NoReturn

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from operators.errors import ErrorKind, TreeError

logger = logging.getLogger(__name__)

ERROR_STATUS_CODES: dict[ErrorKind, int] = {
    ErrorKind.REQUEST_BODY_EMPTY: 400,
    ErrorKind.TIMELINE_RANGE_INVALID: 400,
    ErrorKind.UNAUTHENTICATED: 401,
    ErrorKind.UNAUTHORIZED_USER: 401,
    ErrorKind.COLLECTION_NOT_FOUND: 404,
    ErrorKind.PARENT_TIMELINE_NOT_FOUND: 404,
    ErrorKind.TIMELINE_NOT_FOUND: 404,
    ErrorKind.EXHIBIT_NOT_FOUND: 404,
    ErrorKind.PARENT_EXHIBIT_NOT_FOUND: 404,
    ErrorKind.CONTENT_ITEM_NOT_FOUND: 404,
    ErrorKind.COLLECTION_ID_MISMATCH: 404,
    ErrorKind.USER_NOT_FOUND: 404,
    ErrorKind.SANDBOX_SUPER_COLLECTION_NOT_FOUND: 404,
    ErrorKind.SUPER_COLLECTION_NOT_FOUND: 404,
}


def handle_tree_error(e: Exception, db: Session | None = None) -> NoReturn:
    """Roll back the request's session and convert the failure to an HTTPException."""
    if db is not None:
        db.rollback()

    if isinstance(e, TreeError):
        logger.info("request_rejected error=%s message=%s", e.kind.value, e)
        raise HTTPException(
            status_code=ERROR_STATUS_CODES.get(e.kind, 400),
            detail={"error": e.kind.value, "message": str(e)},
        )
    if isinstance(e, SQLAlchemyError):
        logger.exception("store_failure")
        raise HTTPException(status_code=500, detail="Store failure")

    logger.exception("unexpected_failure")
    raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}")
