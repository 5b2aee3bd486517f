"""
Reprint Backend — Credential Store Interface
==============================================

What:  Abstract contract for looking up and registering login accounts,
       plus the two concrete variants.
Why:   The login stub used to read a list literal baked into the handler.
       Behind this interface the account source is a deployment choice
       (AUTH_BACKEND) and no credential lives in source code.
How:   AuthService depends only on CredentialStore; routes obtain the
       configured variant from `get_credential_store`.

Variants:
    StaticCredentialStore:
        In-memory list seeded from AUTH_STATIC_USERS (bcrypt hashes).
        Signups append to the list and are lost on restart. Process-local:
        each uvicorn worker holds its own copy.
    DatabaseCredentialStore:
        `users` table through the request's AsyncSession.

Both hash with bcrypt and compare with bcrypt.checkpw, in a worker thread
so a slow hash never stalls the event loop.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, List, Optional

import bcrypt
from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from reprint.config import StaticUser, settings
from reprint.database import get_db_session
from reprint.exceptions import DuplicateKeyError
from reprint.models.user import User

logger = logging.getLogger(__name__)


def hash_password(plain: str) -> str:
    return bcrypt.hashpw(
        plain.encode("utf-8"),
        bcrypt.gensalt(rounds=settings.bcrypt_rounds),
    ).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Malformed hash in the seed data; treat as a non-match
        logger.warning("Stored password hash is not a valid bcrypt hash")
        return False


def normalize_email(email: str) -> str:
    return email.strip().lower()


@dataclass(frozen=True)
class UserRecord:
    email: str
    role: str


class CredentialStore(ABC):
    """
    Contract:
        - authenticate() returns the matching account or None; it never
          raises for a wrong password
        - register() raises DuplicateKeyError("User already exists") when the
          email is taken (case-insensitive)
    """

    @abstractmethod
    async def authenticate(self, email: str, password: str) -> Optional[UserRecord]:
        ...

    @abstractmethod
    async def register(self, email: str, password: str, role: str) -> UserRecord:
        ...


class StaticCredentialStore(CredentialStore):

    def __init__(self, users: Iterable[StaticUser] = ()):
        self._users: List[StaticUser] = [
            StaticUser(email=normalize_email(u.email), password_hash=u.password_hash, role=u.role)
            for u in users
        ]

    def _find(self, email: str) -> Optional[StaticUser]:
        email = normalize_email(email)
        return next((u for u in self._users if u.email == email), None)

    async def authenticate(self, email: str, password: str) -> Optional[UserRecord]:
        user = self._find(email)
        if user is None:
            return None
        if not await asyncio.to_thread(verify_password, password, user.password_hash):
            return None
        return UserRecord(email=user.email, role=user.role)

    async def register(self, email: str, password: str, role: str) -> UserRecord:
        if self._find(email) is not None:
            raise DuplicateKeyError(message="User already exists", field="email")
        user = StaticUser(
            email=normalize_email(email),
            password_hash=await asyncio.to_thread(hash_password, password),
            role=role,
        )
        self._users.append(user)
        logger.info("Registered in-memory user %s (role=%s)", user.email, role)
        return UserRecord(email=user.email, role=user.role)


class DatabaseCredentialStore(CredentialStore):

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _find(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.email == normalize_email(email)))
        return result.scalar_one_or_none()

    async def authenticate(self, email: str, password: str) -> Optional[UserRecord]:
        user = await self._find(email)
        if user is None:
            return None
        if not await asyncio.to_thread(verify_password, password, user.password_hash):
            return None
        return UserRecord(email=user.email, role=user.role)

    async def register(self, email: str, password: str, role: str) -> UserRecord:
        if await self._find(email) is not None:
            raise DuplicateKeyError(message="User already exists", field="email")

        user = User(
            email=normalize_email(email),
            password_hash=await asyncio.to_thread(hash_password, password),
            role=role,
        )
        self.db.add(user)
        try:
            await self.db.flush()
        except IntegrityError:
            # Lost a race with a concurrent signup for the same email
            raise DuplicateKeyError(message="User already exists", field="email")
        logger.info("Registered user %s (role=%s)", user.email, role)
        return UserRecord(email=user.email, role=user.role)


# ── Dependency ────────────────────────────────────────────────────────────
# The static store must outlive requests, so it is created once
static_credential_store = StaticCredentialStore(settings.auth_static_users)


async def get_credential_store(
    db: AsyncSession = Depends(get_db_session),
) -> CredentialStore:
    """FastAPI dependency returning the store selected by AUTH_BACKEND."""
    if settings.auth_backend == "database":
        return DatabaseCredentialStore(db)
    return static_credential_store
