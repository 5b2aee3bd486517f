"""Request/response contracts for the login/signup stub."""

from pydantic import BaseModel, Field


class Credentials(BaseModel):
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=1, max_length=128)


class UserInfo(BaseModel):
    email: str
    role: str


class AuthResponse(BaseModel):
    """
    Returned by both /api/auth/login and /api/auth/signup.

    `token` is a fixed placeholder from AUTH_PLACEHOLDER_TOKEN. It grants
    nothing; no route checks it.
    """

    success: bool = True
    user: UserInfo
    token: str
