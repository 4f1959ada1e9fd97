"""Declarative base for all ORM models.

Constraint and index names follow a fixed convention so that the names
created by ``create_all`` match the ones written in the Alembic migrations
(``ix_users_email`` for the unique e-mail index).
"""

from sqlalchemy import MetaData
from sqlalchemy.ext.asyncio import AsyncAttrs
from sqlalchemy.orm import declarative_base

NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
}


class Base(AsyncAttrs, declarative_base(metadata=MetaData(naming_convention=NAMING_CONVENTION))):
    """Abstract base class shared by every ORM model of the service."""

    __abstract__ = True
