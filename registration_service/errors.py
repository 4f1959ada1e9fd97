"""Exceptions raised by the registration flow.

``ValidationError`` and ``ConflictError`` are client errors and end up as a
400 response with field-level detail. ``StorageError`` is a server-side
failure and is rendered as a 500.
"""

from __future__ import annotations

from typing import Dict, Mapping


class RegistrationError(Exception):
    """Base class for every error of the registration flow."""


class ValidationError(RegistrationError):
    """One or more fields of the signup payload violated a rule.

    ``violations`` maps the field name to the message key of its first
    failing check, in field declaration order.
    """

    def __init__(self, violations: Mapping[str, str]) -> None:
        self.violations: Dict[str, str] = dict(violations)
        super().__init__(f"invalid fields: {', '.join(self.violations)}")


class StorageError(RegistrationError):
    """The user store could not complete an operation."""


class ConflictError(StorageError):
    """A unique constraint rejected the record.

    ``field`` names the offending attribute and ``message_key`` the catalog
    key used to report it to the client.
    """

    def __init__(self, field: str, message_key: str) -> None:
        self.field = field
        self.message_key = message_key
        super().__init__(f"{field} already exists")
