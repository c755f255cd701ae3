# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for authentication data.
# =============================================================================

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class RequestIdentity(BaseModel):
    """
    Caller identity extracted from a verified session token.

    This is the minimal information the resource layer needs: who is
    acting (audit columns) and which tenant they act for (row scoping).
    """
    model_config = ConfigDict(frozen=True)

    user_id: str
    organization_id: str
    email: Optional[str] = None


class IdentityResponse(BaseModel):
    """Identity as returned by GET /auth/me."""
    userId: str = Field(..., examples=["8f14e45f-ceea-467f-a0e6-1f9c1d5c1b1e"])
    organizationId: str = Field(..., examples=["org_2a9c"])
    email: Optional[str] = Field(default=None, examples=["ada@example.com"])


class TokenPayload(BaseModel):
    """
    Decoded session token claims.

    Standard JWT claims plus the optional organization claims. Unknown
    claims are ignored.
    """
    model_config = ConfigDict(extra="ignore")

    sub: str = Field(..., min_length=1)
    email: Optional[str] = None
    organization_id: Optional[str] = None
    active_organization_id: Optional[str] = None

    @property
    def tenant(self) -> str:
        """Active organization, falling back to the user id for personal sessions."""
        return self.organization_id or self.active_organization_id or self.sub
