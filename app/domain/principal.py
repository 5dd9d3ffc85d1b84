"""Principal: the authenticated identity making a request.

Created by the auth boundary (JWT verification); the core only reads its id.
"""

from __future__ import annotations

from dataclasses import dataclass

from app.domain.exceptions import UnauthenticatedAccessException


@dataclass(frozen=True)
class Principal:
    """Authenticated caller. id is stable and unique across tenants."""

    id: str

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Principal id must be a non-empty string")


def require_principal(principal: Principal | None) -> Principal:
    """Return principal or raise UnauthenticatedAccessException when none is bound."""
    if principal is None:
        raise UnauthenticatedAccessException()
    return principal
