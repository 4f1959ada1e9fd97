"""Pydantic schemas for request and response bodies of the registration_service.

The signup request is deliberately permissive: every field is optional so that
missing or null values reach the validation pipeline and are reported as
field-level violations instead of a framework-level 422.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SignupRequest(BaseModel):
    """Schema for ``POST /api/1.0/users`` requests."""

    model_config = ConfigDict(extra="ignore")

    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None

    @field_validator("username", "email", "password", mode="before")
    @classmethod
    def _scalars_as_text(cls, value: Any) -> Any:
        """Accept JSON numbers and booleans and treat them as text.

        Booleans use their JSON spelling (``true``/``false``). Objects and
        arrays are left alone and rejected as an invalid field.
        """
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (int, float)):
            return str(value)
        return value

    def as_payload(self) -> Dict[str, Optional[str]]:
        return self.model_dump(include={"username", "email", "password"})


class SignupResponse(BaseModel):
    """Schema returned after a user was created."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    message: str


class ValidationErrorResponse(BaseModel):
    """Schema returned when one or more fields were rejected."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    validation_errors: Dict[str, str] = Field(alias="validationErrors")


class ErrorResponse(BaseModel):
    """Schema returned on unexpected server-side failures."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    message: str
