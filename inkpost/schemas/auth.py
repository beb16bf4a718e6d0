"""Registration and login payloads."""

import uuid

from pydantic import Field

from inkpost.schemas.common import CamelModel


class RegisterRequest(CamelModel):
    name: str = Field(min_length=1, max_length=120)
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=1)


class LoginRequest(CamelModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class UserResponse(CamelModel):
    """Public view of a user; the password hash is never exposed."""
    id: uuid.UUID
    name: str
    email: str


class TokenResponse(CamelModel):
    token: str = Field(description="Signed bearer token")
    token_type: str = Field(default="bearer")
    user: UserResponse
