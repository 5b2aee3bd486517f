"""
Reprint Backend — User SQLAlchemy Model
=========================================

Backs the database variant of the credential store (AUTH_BACKEND=database).
The static variant never touches this table.
"""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column

from reprint.database import Base
from reprint.models.book import utcnow


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Stored lower-cased; see credential_store.normalize_email
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    # bcrypt hash, never the plaintext password
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    role: Mapped[str] = mapped_column(String(50), nullable=False, default="librarian")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"
