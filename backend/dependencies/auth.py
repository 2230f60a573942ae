from fastapi import Header

from operators.access_operator import Identity


def resolve_identity(
    name_identifier: str | None,
    identity_provider: str | None,
) -> Identity | None:
    name_identifier = name_identifier.strip() if name_identifier else None
    identity_provider = identity_provider.strip() if identity_provider else None
    if not name_identifier or not identity_provider:
        return None
    return Identity(
        name_identifier=name_identifier,
        identity_provider=identity_provider,
    )


def get_optional_identity(
    x_name_identifier: str | None = Header(default=None),
    x_identity_provider: str | None = Header(default=None),
) -> Identity | None:
    """
    Caller identity as asserted by the identity gateway in front of the service.

    Both headers must be present; anything less is an anonymous caller.
    """
    return resolve_identity(x_name_identifier, x_identity_provider)
