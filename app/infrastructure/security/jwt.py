"""Bearer token handling: issue and verify HS256 JWTs whose sub is the principal id.

Secret and algorithm come from app.core.config.
"""

from datetime import UTC, datetime, timedelta
from typing import Any, cast

from jose import JWTError, jwt

from app.core.config import get_settings
from app.domain.principal import Principal


def create_access_token(
    subject: str,
    expires_delta: timedelta | None = None,
    extra_claims: dict[str, Any] | None = None,
) -> str:
    """Create a signed access token for a principal id.

    Args:
        subject: Principal id, stored as the sub claim.
        expires_delta: Optional TTL; else settings.access_token_expire_minutes.
        extra_claims: Additional claims merged into the payload.
    """
    settings = get_settings()
    ttl = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    to_encode: dict[str, Any] = dict(extra_claims or {})
    to_encode["sub"] = subject
    to_encode["exp"] = datetime.now(UTC) + ttl
    encoded = jwt.encode(
        to_encode,
        settings.secret_key.get_secret_value(),
        algorithm=settings.algorithm,
    )
    return cast(str, encoded)


def verify_token(token: str) -> dict[str, Any]:
    """Decode a token and return its payload.

    Raises:
        ValueError: Token is malformed, expired, or lacks exp/sub.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.secret_key.get_secret_value(),
            algorithms=[settings.algorithm],
            options={"require_exp": True, "require_sub": True},
        )
    except JWTError as e:
        raise ValueError(f"Invalid token: {e!s}") from e
    if not payload.get("sub"):
        raise ValueError("Token missing required claim: sub")
    return payload


def principal_from_token(token: str) -> Principal:
    """Resolve the authenticated Principal from a bearer token (raises ValueError)."""
    return Principal(id=str(verify_token(token)["sub"]))
