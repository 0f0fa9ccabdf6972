from fastapi import APIRouter, Depends, HTTPException, status

from app.api.deps import get_auth_service
from app.core.security import create_access_token, get_token_remaining_time
from app.schemas.auth import DevTokenRequest, DevTokenResponse
from app.schemas.document import ErrorResponse
from app.services.auth_service import AuthService

# ============================================================
# Router Setup
# ============================================================

router = APIRouter(tags=["Authentication"])


# ============================================================
# Development Token Endpoint
# ============================================================

@router.post(
    "/test-token",
    response_model=DevTokenResponse,
    responses={
        200: {"description": "Token issued"},
        400: {"model": ErrorResponse, "description": "user_id missing"},
        404: {"model": ErrorResponse, "description": "Not available outside development"},
    }
)
async def create_test_token(
    request: DevTokenRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Issue a bearer token for any user id.

    Only exists while ENV=development; elsewhere it answers 404.
    """
    if not auth_service.settings.is_development:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Not Found"
        )

    token = create_access_token(subject=request.user_id, settings=auth_service.settings)

    return DevTokenResponse(
        token=token,
        user_id=request.user_id,
        expires_in=get_token_remaining_time(token, auth_service.settings) or 0,
    )
