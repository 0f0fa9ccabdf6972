"""
Auth Schemas

Development token flow only; production tokens come from Firebase.
"""

from pydantic import BaseModel, Field, field_validator


class DevTokenRequest(BaseModel):
    """Request body for POST /auth/test-token."""
    user_id: str = Field(
        ...,
        max_length=128,
        description="Owner id the token is issued for",
        examples=["test-user-1"]
    )

    @field_validator("user_id")
    def user_id_not_blank(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("user_id is required")
        return v


class DevTokenResponse(BaseModel):
    token: str = Field(..., description="Bearer token, valid in development only")
    user_id: str
    expires_in: int = Field(..., description="Seconds until the token expires")
    token_type: str = "bearer"
