"""Async persistence of user records."""

from __future__ import annotations

import logging
from typing import Mapping, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from registration_service.errors import ConflictError, StorageError
from registration_service.models import User

logger = logging.getLogger(__name__)

_EMAIL_CONSTRAINT_MARKERS = ("users.email", "ix_users_email")
_UNIQUE_MARKERS = ("unique", "duplicate")


def _is_email_conflict(exc: IntegrityError) -> bool:
    """Whether ``exc`` was raised by the unique index on ``users.email``.

    Drivers only expose the violated constraint through their message:
    SQLite names the column (``UNIQUE constraint failed: users.email``),
    PostgreSQL and MySQL name the index (``ix_users_email``).
    """
    message = str(exc.orig).lower()
    return any(m in message for m in _UNIQUE_MARKERS) and any(
        m in message for m in _EMAIL_CONSTRAINT_MARKERS
    )


class UserStore:
    """Lookup-by-email and create operations on the ``users`` table.

    Each call opens its own session from the injected factory, so a store
    instance holds no per-request state.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def find_by_email(self, email: str) -> Optional[User]:
        """Return the user registered with ``email`` or ``None``."""
        try:
            async with self._session_factory() as session:
                stmt = select(User).where(User.email == email)
                result = await session.execute(stmt)
                return result.scalar_one_or_none()
        except SQLAlchemyError as exc:
            logger.error("Lookup by email failed: %s", exc, exc_info=True)
            raise StorageError("could not query users") from exc

    async def create(self, record: Mapping[str, str]) -> User:
        """Insert a user built from ``record`` and return it.

        ``record`` must carry ``username``, ``email`` and ``hashed_password``.
        Raises :class:`ConflictError` when the e-mail unique index rejects the
        row and :class:`StorageError` on any other database failure.
        """
        user = User(
            username=record["username"],
            email=record["email"],
            hashed_password=record["hashed_password"],
        )
        async with self._session_factory() as session:
            try:
                session.add(user)
                await session.commit()
                await session.refresh(user)
            except IntegrityError as exc:
                await session.rollback()
                if not _is_email_conflict(exc):
                    logger.error("Integrity error during user creation: %s", exc, exc_info=True)
                    raise StorageError("could not save user") from exc
                logger.warning("Insert rejected by unique constraint for %s", record["email"])
                raise ConflictError("email", "emailInUse") from exc
            except SQLAlchemyError as exc:
                await session.rollback()
                logger.error("Database error during user creation: %s", exc, exc_info=True)
                raise StorageError("could not save user") from exc

        logger.info("User created with ID: %s", user.id)
        return user
