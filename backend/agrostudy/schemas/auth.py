"""Authentication schemas."""

from uuid import UUID

from pydantic import EmailStr, Field

from agrostudy.schemas.base import BaseSchema


class Identity(BaseSchema):
    """The authenticated user every collection is scoped to."""

    id: UUID
    email: str
    name: str


class SignUpRequest(BaseSchema):
    """Request schema for creating an account."""

    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    name: str = Field(..., min_length=1, max_length=255)


class SignInRequest(BaseSchema):
    """Request schema for email/password login."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)


class TokenResponse(BaseSchema):
    """Response schema for successful authentication."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Token expiry in seconds")
