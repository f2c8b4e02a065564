"""
FastAPI Dependencies.

Shared dependencies for request handling.
"""

import uuid
from typing import Annotated

from fastapi import Depends, Header, Request, Response
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from notedesk.backend.core.config import get_app_config
from notedesk.backend.core.database import get_db_session
from notedesk.backend.core.exceptions import NotAuthenticatedError
from notedesk.backend.core.logging import get_logger
from notedesk.backend.core.security import owner_id_from_token

logger = get_logger(__name__)

_bearer = HTTPBearer(auto_error=False)

# Type alias for database session dependency
DbSession = Annotated[AsyncSession, Depends(get_db_session)]


async def get_request_id(x_request_id: str | None = Header(None)) -> str:
    """
    Extract or generate request ID from headers.

    Used for request tracing and correlation.
    """
    return x_request_id or str(uuid.uuid4())


RequestId = Annotated[str, Depends(get_request_id)]


async def get_current_owner(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_bearer)],
) -> str:
    """
    Resolve the authenticated owner from the Bearer token.

    Raises:
        NotAuthenticatedError: If no token is sent or it does not validate
    """
    if credentials is None or not credentials.credentials:
        raise NotAuthenticatedError()
    return owner_id_from_token(credentials.credentials)


CurrentOwner = Annotated[str, Depends(get_current_owner)]


async def enforce_rate_limit(
    request: Request,
    response: Response,
    owner_id: CurrentOwner,
) -> None:
    """
    Count a mutating request against the owner's rate limit.

    Sets X-RateLimit-Remaining on the response. Does nothing when the
    feature flag is off or the app has no limiter.

    Raises:
        RateLimitError: If the owner is over the limit for the current window
    """
    if not get_app_config().features.api_rate_limit_enabled:
        return
    limiter = getattr(request.app.state, "rate_limiter", None)
    if limiter is None:
        return
    result = limiter.enforce(f"owner:{owner_id}")
    response.headers["X-RateLimit-Remaining"] = str(result.remaining)


RateLimited = Depends(enforce_rate_limit)
