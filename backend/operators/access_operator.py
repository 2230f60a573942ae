from dataclasses import dataclass

from database.models import Collection, User


@dataclass(frozen=True)
class Identity:
    """External identity of a caller, as asserted by the identity gateway."""

    name_identifier: str
    identity_provider: str | None = None

    @property
    def cache_key(self) -> str:
        return f"{self.identity_provider or ''}|{self.name_identifier}"


def owner_identity(user: User | None) -> Identity | None:
    """Identity of a stored owner row. Rows without a name identifier own nothing."""
    if user is None or user.name_identifier is None:
        return None
    return Identity(
        name_identifier=user.name_identifier,
        identity_provider=user.identity_provider,
    )


def can_modify(acting: Identity | None, owner: Identity | None) -> bool:
    if owner is None:
        return True
    return acting is not None and acting == owner


def can_modify_collection(acting: Identity | None, collection: Collection) -> bool:
    return can_modify(acting, owner_identity(collection.owner))


def is_owner(acting: Identity | None, user: User | None) -> bool:
    """Strict ownership: the row must carry an identity equal to the caller's."""
    owner = owner_identity(user)
    return owner is not None and acting == owner
