"""Field validation for signup payloads.

Each field owns an ordered list of checks. A check receives the field value
and returns ``None`` when it passes or the message key of the violated rule.
Checks may be coroutine functions (the e-mail uniqueness lookup). Within a
field evaluation stops at the first failure; every field is always evaluated.

Checks only produce message keys, so this module knows nothing about locales.
"""

from __future__ import annotations

import inspect
import logging
import re
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    Mapping,
    Optional,
    Protocol,
    Sequence,
    Tuple,
    Union,
)

from email_validator import EmailNotValidError, validate_email

from registration_service.models import USERNAME_MAX_LENGTH, User

logger = logging.getLogger(__name__)

USERNAME_MIN_LENGTH = 4
PASSWORD_MIN_LENGTH = 6

_LOWERCASE = re.compile(r"[a-z]")
_UPPERCASE = re.compile(r"[A-Z]")
_DIGIT = re.compile(r"[0-9]")

CheckResult = Union[Optional[str], Awaitable[Optional[str]]]
Check = Callable[[Any], CheckResult]
FieldRules = Sequence[Tuple[str, Sequence[Check]]]


class EmailLookup(Protocol):
    async def find_by_email(self, email: str) -> Optional[User]: ...


def is_empty(value: Any) -> bool:
    return value is None or value == ""


def required(message_key: str) -> Check:
    """Build a presence check failing with ``message_key``."""

    def check(value: Any) -> Optional[str]:
        return message_key if is_empty(value) else None

    return check


def length_between(
    message_key: str, min_length: int = 0, max_length: Optional[int] = None
) -> Check:
    """Build an inclusive length check failing with ``message_key``."""

    def check(value: str) -> Optional[str]:
        size = len(value)
        if size < min_length or (max_length is not None and size > max_length):
            return message_key
        return None

    return check


def email_syntax(value: str) -> Optional[str]:
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return "emailInvalid"
    return None


def password_strength(value: str) -> Optional[str]:
    """At least one lowercase letter, one uppercase letter and one digit."""
    if _LOWERCASE.search(value) and _UPPERCASE.search(value) and _DIGIT.search(value):
        return None
    return "passwordPattern"


def email_not_in_use(store: EmailLookup) -> Check:
    """Build the uniqueness check backed by ``store``."""

    async def check(value: str) -> Optional[str]:
        if await store.find_by_email(value) is not None:
            return "emailInUse"
        return None

    return check


def default_rules(store: EmailLookup) -> FieldRules:
    """Signup rules in field declaration order."""
    return (
        (
            "username",
            (
                required("usernameNull"),
                length_between("usernameSize", USERNAME_MIN_LENGTH, USERNAME_MAX_LENGTH),
            ),
        ),
        (
            "email",
            (
                required("emailNull"),
                email_syntax,
                email_not_in_use(store),
            ),
        ),
        (
            "password",
            (
                required("passwordNull"),
                length_between("passwordSize", PASSWORD_MIN_LENGTH),
                password_strength,
            ),
        ),
    )


async def _run_check(check: Check, value: Any) -> Optional[str]:
    result = check(value)
    if inspect.isawaitable(result):
        result = await result
    return result


class ValidationPipeline:
    """Evaluate every field of a payload against its ordered checks."""

    def __init__(self, rules: FieldRules) -> None:
        self._rules = tuple((field, tuple(checks)) for field, checks in rules)

    @classmethod
    def for_store(cls, store: EmailLookup) -> "ValidationPipeline":
        return cls(default_rules(store))

    @property
    def fields(self) -> Tuple[str, ...]:
        return tuple(field for field, _ in self._rules)

    async def validate(self, payload: Mapping[str, Any]) -> Dict[str, str]:
        """Return ``{field: message_key}`` for every field that failed.

        Passing fields are absent; the mapping follows rule order.
        """
        violations: Dict[str, str] = {}
        for field, checks in self._rules:
            value = payload.get(field)
            for check in checks:
                key = await _run_check(check, value)
                if key is not None:
                    violations[field] = key
                    break

        if violations:
            logger.info("Signup payload rejected: %s", violations)
        return violations
