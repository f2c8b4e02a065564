"""
Security Utilities.

Bearer token handling. The identity provider issues JWTs whose `sub`
claim is the owner id used to scope every note and tag.
"""

from datetime import timedelta
from typing import Any

from jose import JWTError, jwt

from notedesk.backend.core.config import get_app_config, get_settings
from notedesk.backend.core.exceptions import NotAuthenticatedError
from notedesk.backend.core.logging import get_logger
from notedesk.backend.core.utils import utc_now

logger = get_logger(__name__)


def create_access_token(data: dict[str, Any], expires_delta: timedelta | None = None) -> str:
    """
    Create a JWT access token.

    Args:
        data: Payload data to encode; `sub` carries the owner id
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token
    """
    settings = get_settings()
    jwt_config = get_app_config().security.jwt
    to_encode = data.copy()

    if expires_delta:
        expire = utc_now() + expires_delta
    else:
        expire = utc_now() + timedelta(minutes=jwt_config.access_token_expire_minutes)

    to_encode.update({"exp": expire, "type": "access", "aud": jwt_config.audience})
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=jwt_config.algorithm)


def decode_token(token: str) -> dict[str, Any]:
    """
    Decode and validate a JWT token.

    Raises:
        NotAuthenticatedError: If token is invalid or expired
    """
    settings = get_settings()
    jwt_config = get_app_config().security.jwt
    try:
        return jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[jwt_config.algorithm],
            audience=jwt_config.audience,
        )
    except JWTError as e:
        logger.warning("Token decode failed", extra={"error": str(e)})
        raise NotAuthenticatedError("Invalid or expired token") from e


def owner_id_from_token(token: str) -> str:
    """
    Extract the owner id from an access token.

    Raises:
        NotAuthenticatedError: If the token is invalid or has no subject
    """
    payload = decode_token(token)
    if payload.get("type") != "access":
        raise NotAuthenticatedError("Invalid token type")
    owner_id = payload.get("sub")
    if not owner_id:
        raise NotAuthenticatedError("Token has no subject")
    return str(owner_id)
