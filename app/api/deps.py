from fastapi import HTTPException, Depends, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from typing import Optional
import logging

from app.services.auth_service import AuthService, AuthServiceUnavailableError
from app.services.document_service import DocumentService

logger = logging.getLogger(__name__)

# Security scheme for Swagger UI.
# auto_error=False: a missing header must be a 401, not FastAPI's 403.
security = HTTPBearer(auto_error=False)


# =====================================================
# Application services (built in the lifespan)
# =====================================================
def get_document_service(request: Request) -> DocumentService:
    return request.app.state.document_service


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


# =====================================================
# Get Current user
# =====================================================
async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_service: AuthService = Depends(get_auth_service),
) -> str:
    """
    Dependency that validates the bearer token and returns the owner id.

    Raises:
        HTTPException 401: If token is invalid or missing
        HTTPException 500: If no token verifier is available
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header required",
            headers={"WWW-Authenticate": "Bearer"}
        )

    try:
        return await auth_service.verify_token(credentials.credentials)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"}
        )
    except AuthServiceUnavailableError as e:
        logger.error(f"Token verification unavailable: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        )
