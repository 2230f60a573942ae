"""
Deterministic identifiers for named super collections and collections.

Identifiers are MD5 digests of the normalised title read as a UUID in
little-endian field order, the layout earlier .NET deployments produced, so
URLs and stored ids stay valid across platforms and restarts.
"""

import hashlib
from urllib.parse import quote, unquote
from uuid import UUID

COLLECTION_SEPARATOR = "|"


def derive_id(text: str) -> UUID:
    normalized = text.replace(" ", "-").lower()
    # A fresh hash object per call keeps this safe to call from any thread.
    digest = hashlib.md5(normalized.encode("utf-8"), usedforsecurity=False).digest()
    return UUID(bytes_le=digest)


def derive_collection_id(super_collection_title: str, collection_title: str) -> UUID:
    return derive_id(
        f"{super_collection_title.lower()}{COLLECTION_SEPARATOR}{collection_title.lower()}"
    )


def friendly_url_replacements(value: str) -> str:
    """Title to URL path segment: spaces become '-', the rest is percent-encoded."""
    return quote(value.replace(" ", "-"), safe="")


def friendly_url_decode(value: str) -> str:
    return unquote(value.replace("-", " "))
