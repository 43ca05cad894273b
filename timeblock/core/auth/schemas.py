# timeblock/core/auth/schemas.py

from __future__ import annotations

from pydantic import BaseModel, Field


class Token(BaseModel):
    """JWT returned to the client."""
    access_token: str
    token_type: str = "bearer"


class TokenData(BaseModel):
    """Claims we rely on inside a JWT ('sub' carries the user id)."""
    user_id: str | None = Field(None, description="User ID within our application")


class TestLoginRequest(BaseModel):
    """Body of the development-only login endpoint."""
    user_id: str = Field(..., min_length=1, description="User ID to login as (for testing)")
    name: str | None = Field(None, description="Optional display name")
    email: str | None = Field(None, description="Optional email")
