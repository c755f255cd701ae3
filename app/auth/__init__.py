# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Provides the identity gate: Bearer JWT verification producing the caller's
# user id and tenant.
#
# Usage:
#   from app.auth import IdentityDep
#
#   @router.get("/protected")
#   async def protected(identity: IdentityDep):
#       return {"user_id": identity.user_id}
# =============================================================================

from app.auth.dependencies import IdentityDep, decode_session_token, get_current_identity
from app.auth.models import IdentityResponse, RequestIdentity, TokenPayload

__all__ = [
    "IdentityDep",
    "decode_session_token",
    "get_current_identity",
    "IdentityResponse",
    "RequestIdentity",
    "TokenPayload",
]
