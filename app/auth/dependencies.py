# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Provides dependency injection for the identity gate.
#
# Session tokens are HS256 JWTs signed with JWT_SECRET and carrying:
# - sub: user id (required)
# - organization_id / active_organization_id: tenant (optional; falls back
#   to the user id)
# - aud: must equal JWT_AUDIENCE
#
# A missing, expired or otherwise invalid token raises UnauthorizedError,
# rendered as the 401 envelope by app/exceptions.py.
#
# Usage:
#   from app.auth import IdentityDep
#
#   @router.get("/protected")
#   async def protected(identity: IdentityDep):
#       return {"tenant": identity.organization_id}
# =============================================================================

import logging
from typing import Annotated, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import ValidationError

from app.auth.models import RequestIdentity, TokenPayload
from app.config import Settings, get_settings
from app.exceptions import UnauthorizedError

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"

# HTTP Bearer token extractor. auto_error is off so a missing header
# produces our 401 envelope instead of FastAPI's 403.
security = HTTPBearer(
    auto_error=False,
    description="Session token issued by the authentication provider",
)


def decode_session_token(token: str, settings: Settings) -> RequestIdentity:
    """
    Verify a session token and extract the caller identity.

    Args:
        token: Raw JWT (without the "Bearer " prefix)
        settings: Provides JWT_SECRET and JWT_AUDIENCE

    Returns:
        RequestIdentity: user id and tenant

    Raises:
        UnauthorizedError: If the token is expired, badly signed, has the
            wrong audience, or lacks a subject
    """
    try:
        claims = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            options={"require_aud": True, "require_exp": True},
        )
    except ExpiredSignatureError:
        logger.warning("Session token has expired")
        raise UnauthorizedError("token expired")
    except JWTError as e:
        logger.warning(f"Session token validation failed: {e}")
        raise UnauthorizedError("invalid token")

    try:
        payload = TokenPayload.model_validate(claims)
    except ValidationError:
        logger.warning("Session token missing 'sub' claim")
        raise UnauthorizedError("missing subject")

    return RequestIdentity(
        user_id=payload.sub,
        organization_id=payload.tenant,
        email=payload.email,
    )


async def get_current_identity(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> RequestIdentity:
    """
    Resolve the caller of the current request.

    Attached as a router-level dependency of every resource router; FastAPI
    caches it per request, so handlers that also declare it get the same
    instance without decoding twice.

    Raises:
        UnauthorizedError: 401 if the Authorization header is absent or invalid
    """
    if credentials is None:
        raise UnauthorizedError("missing bearer token")

    identity = decode_session_token(credentials.credentials, settings)
    logger.debug(f"Authenticated user {identity.user_id} (org {identity.organization_id})")
    return identity


# Type alias for dependency injection
IdentityDep = Annotated[RequestIdentity, Depends(get_current_identity)]
