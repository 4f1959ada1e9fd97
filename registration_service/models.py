# pylint: disable=not-callable
"""SQLAlchemy models for the registration_service.

Only the ``User`` model is defined here; it mirrors the schema created by the
Alembic migrations. The unique index on ``email`` is the storage-level
guarantee that no two accounts share an address.
"""

from __future__ import annotations

from sqlalchemy import Column, DateTime, Integer, String, func

from registration_service.db_core import Base

USERNAME_MAX_LENGTH = 32
EMAIL_MAX_LENGTH = 255


class User(Base):
    """ORM model representing a registered account.

    Attributes
    ----------
    id:
        Integer primary key.
    username:
        Display name chosen at signup, 4 to 32 characters.
    email:
        Unique e-mail address.
    hashed_password:
        One-way password hash; the clear-text password is never stored.
    created_at:
        Insertion timestamp set by the database.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(USERNAME_MAX_LENGTH), nullable=False)
    email = Column(String(EMAIL_MAX_LENGTH), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    def __repr__(self) -> str:
        return f"<User id={self.id!r} username={self.username!r} email={self.email!r}>"
