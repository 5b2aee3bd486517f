"""
Reprint Backend — Auth Stub Service
=====================================

What:  Login and signup on top of a CredentialStore.
Why:   The catalog UI expects a `{success, user, token}` envelope after login.
How:   Delegates account lookup to the injected store and returns the fixed
       placeholder token from settings.

This is not an authorization layer. No route checks the token, and the
token is the same for every user.
"""

import logging

from reprint.config import settings
from reprint.exceptions import AuthenticationError
from reprint.schemas.auth import AuthResponse, Credentials, UserInfo
from reprint.services.credential_store import CredentialStore, UserRecord

logger = logging.getLogger(__name__)


class AuthService:

    def _envelope(self, user: UserRecord) -> AuthResponse:
        return AuthResponse(
            success=True,
            user=UserInfo(email=user.email, role=user.role),
            token=settings.auth_placeholder_token,
        )

    async def login(self, store: CredentialStore, credentials: Credentials) -> AuthResponse:
        user = await store.authenticate(credentials.email, credentials.password)
        if user is None:
            # Email is logged, password never is
            logger.info("Failed login for %s", credentials.email)
            raise AuthenticationError()
        logger.info("Login for %s (role=%s)", user.email, user.role)
        return self._envelope(user)

    async def signup(self, store: CredentialStore, credentials: Credentials) -> AuthResponse:
        """Raises DuplicateKeyError when the email is already registered."""
        user = await store.register(
            credentials.email,
            credentials.password,
            role=settings.auth_default_role,
        )
        return self._envelope(user)


auth_service = AuthService()
