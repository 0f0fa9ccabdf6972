from fastapi import APIRouter
from app.api.v1.endpoints import auth, documents

# ============================================================
# Main API v1 Router
# ============================================================

api_router = APIRouter()

# Development token route at /auth
api_router.include_router(
    auth.router,
    prefix="/auth"
)

# Include document routes at /docs
api_router.include_router(
    documents.router,
    prefix="/docs"
)
