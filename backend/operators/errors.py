from enum import Enum


class ErrorKind(str, Enum):
    REQUEST_BODY_EMPTY = "RequestBodyEmpty"
    UNAUTHENTICATED = "Unauthenticated"
    UNAUTHORIZED_USER = "UnauthorizedUser"
    COLLECTION_NOT_FOUND = "CollectionNotFound"
    PARENT_TIMELINE_NOT_FOUND = "ParentTimelineNotFound"
    TIMELINE_NOT_FOUND = "TimelineNotFound"
    TIMELINE_RANGE_INVALID = "TimelineRangeInvalid"
    EXHIBIT_NOT_FOUND = "ExhibitNotFound"
    PARENT_EXHIBIT_NOT_FOUND = "ParentExhibitNotFound"
    CONTENT_ITEM_NOT_FOUND = "ContentItemNotFound"
    COLLECTION_ID_MISMATCH = "CollectionIdMismatch"
    USER_NOT_FOUND = "UserNotFound"
    SANDBOX_SUPER_COLLECTION_NOT_FOUND = "SandboxSuperCollectionNotFound"
    SUPER_COLLECTION_NOT_FOUND = "SuperCollectionNotFound"


ERROR_DESCRIPTIONS: dict[ErrorKind, str] = {
    ErrorKind.REQUEST_BODY_EMPTY: "Request body empty",
    ErrorKind.UNAUTHENTICATED: "User is not authenticated",
    ErrorKind.UNAUTHORIZED_USER: "Unauthorized User",
    ErrorKind.COLLECTION_NOT_FOUND: "Collection not found",
    ErrorKind.PARENT_TIMELINE_NOT_FOUND: "Parent timeline not found",
    ErrorKind.TIMELINE_NOT_FOUND: "Timeline not found",
    ErrorKind.TIMELINE_RANGE_INVALID: "Timeline lies outside of bounds of its parent timeline",
    ErrorKind.EXHIBIT_NOT_FOUND: "Exhibit not found",
    ErrorKind.PARENT_EXHIBIT_NOT_FOUND: "Parent exhibit not found",
    ErrorKind.CONTENT_ITEM_NOT_FOUND: "Content item not found",
    ErrorKind.COLLECTION_ID_MISMATCH: "Collection id mismatch",
    ErrorKind.USER_NOT_FOUND: "User not found",
    ErrorKind.SANDBOX_SUPER_COLLECTION_NOT_FOUND: "Default sandbox superCollection not found",
    ErrorKind.SUPER_COLLECTION_NOT_FOUND: "SuperCollection not found",
}


class TreeError(Exception):
    """Base exception for timeline tree operations. Carries a stable error kind."""

    kind: ErrorKind

    def __init__(self, kind: ErrorKind | None = None, message: str | None = None):
        if kind is not None:
            self.kind = kind
        super().__init__(message or ERROR_DESCRIPTIONS[self.kind])


class RequestBodyEmptyError(TreeError):
    kind = ErrorKind.REQUEST_BODY_EMPTY


class AuthorizationError(TreeError):
    """Raised when the acting identity may not perform the mutation."""

    kind = ErrorKind.UNAUTHORIZED_USER


class NotFoundError(TreeError):
    """Raised when a named entity does not exist."""

    def __init__(self, kind: ErrorKind, entity_id=None):
        self.entity_id = entity_id
        message = ERROR_DESCRIPTIONS[kind]
        if entity_id is not None:
            message = f"{message}: {entity_id}"
        super().__init__(kind, message)


class TimelineRangeError(TreeError):
    kind = ErrorKind.TIMELINE_RANGE_INVALID

    def __init__(self, from_year: float, to_year: float):
        self.from_year = from_year
        self.to_year = to_year
        super().__init__(
            message=f"{ERROR_DESCRIPTIONS[self.kind]} (from_year={from_year}, to_year={to_year})"
        )


class CollectionMismatchError(TreeError):
    kind = ErrorKind.COLLECTION_ID_MISMATCH
