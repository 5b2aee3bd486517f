"""
Reprint Backend — Auth Stub Routes
====================================

What:  POST /api/auth/login and POST /api/auth/signup.
How:   The credential store comes from `get_credential_store`, so the same
       handlers work against the in-memory list or the users table.

Both responses carry a fixed placeholder token; see AuthService.
"""

from fastapi import APIRouter, Depends

from reprint.schemas.auth import AuthResponse, Credentials
from reprint.schemas.common import ErrorResponse
from reprint.services.auth_service import auth_service
from reprint.services.credential_store import CredentialStore, get_credential_store

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={401: {"description": "Invalid credentials", "model": ErrorResponse}},
    summary="Check credentials",
)
async def login(
    credentials: Credentials,
    store: CredentialStore = Depends(get_credential_store),
) -> AuthResponse:
    return await auth_service.login(store, credentials)


@router.post(
    "/signup",
    response_model=AuthResponse,
    responses={400: {"description": "User already exists", "model": ErrorResponse}},
    summary="Register an account",
)
async def signup(
    credentials: Credentials,
    store: CredentialStore = Depends(get_credential_store),
) -> AuthResponse:
    return await auth_service.signup(store, credentials)
