"""Password hashing helpers.

The module provides a thin wrapper around :class:`passlib.context.CryptContext`
(Argon2 by default). Hashing is CPU bound, so the async methods run it in a
worker thread to keep the event loop responsive.
"""

from __future__ import annotations

import asyncio
from typing import Sequence

from passlib.context import CryptContext


class PasswordHasher:
    """Salted, cost-factored one-way password hashing.

    Every call to :meth:`hash` draws a fresh random salt, so hashing the same
    password twice yields two different strings that both verify.
    """

    def __init__(self, schemes: Sequence[str] = ("argon2",)) -> None:
        self._context = CryptContext(schemes=list(schemes), deprecated="auto")

    def hash_sync(self, password: str) -> str:
        return self._context.hash(password)

    def verify_sync(self, plain_password: str, hashed_password: str) -> bool:
        return self._context.verify(plain_password, hashed_password)

    async def hash(self, password: str) -> str:
        """Return a secure hash for ``password``."""
        return await asyncio.to_thread(self.hash_sync, password)

    async def verify(self, plain_password: str, hashed_password: str) -> bool:
        """Verify that ``plain_password`` matches ``hashed_password``."""
        return await asyncio.to_thread(self.verify_sync, plain_password, hashed_password)
