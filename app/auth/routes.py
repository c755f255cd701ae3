# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# API endpoints for authentication-related operations.
#
# Note: signup/login and token issuance are handled by the authentication
# provider. This route only reports who the current token identifies.
# =============================================================================

from fastapi import APIRouter

from app.auth.dependencies import IdentityDep
from app.auth.models import IdentityResponse
from core.models.envelopes import ErrorResponse, SuccessResponse

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.get(
    "/me",
    response_model=SuccessResponse[IdentityResponse],
    responses={401: {"model": ErrorResponse, "description": "Unauthorized"}},
)
async def get_current_identity_info(identity: IdentityDep):
    """
    Get the identity resolved from the current session token.

    Useful for checking which organization rows will be scoped to.
    """
    return SuccessResponse[IdentityResponse](
        data=IdentityResponse(
            userId=identity.user_id,
            organizationId=identity.organization_id,
            email=identity.email,
        )
    )
