"""User registration FastAPI application.

This module exposes the endpoints of the registration_service:

- ``POST /api/1.0/users``: validate a signup payload, hash the password and
  persist a new user; answers ``{"message": ...}`` on success or
  ``{"validationErrors": {...}}`` with status 400, also for bodies that are
  not a JSON object or carry non-scalar fields.
- ``GET /health``: liveness check.

Collaborators (user store, validation pipeline, password hasher, message
catalog) are built by :func:`create_app` and kept on ``app.state``; endpoints
receive them through dependencies. Run with::

    uvicorn registration_service.app:create_app --factory
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, Iterable, Mapping, Optional

from fastapi import APIRouter, Body, Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from registration_service.config import Settings
from registration_service.database import build_engine, create_tables
from registration_service.errors import ConflictError, StorageError, ValidationError
from registration_service.i18n import MessageCatalog
from registration_service.schemas import (
    ErrorResponse,
    SignupRequest,
    SignupResponse,
    ValidationErrorResponse,
)
from registration_service.security import PasswordHasher
from registration_service.store import UserStore
from registration_service.validation import ValidationPipeline

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

router = APIRouter()

# Keys reported when a field is neither text nor a JSON scalar.
INVALID_FIELD_KEYS = {
    "username": "usernameInvalid",
    "email": "emailInvalid",
    "password": "passwordInvalid",
}
BODY_FIELD = "body"


def get_user_store(request: Request) -> UserStore:
    return request.app.state.user_store


def get_pipeline(request: Request) -> ValidationPipeline:
    return request.app.state.pipeline


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_catalog(request: Request) -> MessageCatalog:
    return request.app.state.catalog


def request_locale(request: Request) -> str:
    """Locale negotiated from the ``Accept-Language`` header."""
    catalog: MessageCatalog = request.app.state.catalog
    return catalog.negotiate(request.headers.get("accept-language"))


@router.post(
    "/api/1.0/users",
    response_model=SignupResponse,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ValidationErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    },
)
async def register(
    signup: Optional[SignupRequest] = Body(None),
    locale: str = Depends(request_locale),
    pipeline: ValidationPipeline = Depends(get_pipeline),
    store: UserStore = Depends(get_user_store),
    hasher: PasswordHasher = Depends(get_password_hasher),
    catalog: MessageCatalog = Depends(get_catalog),
) -> SignupResponse:
    """Register a new user.

    Runs the validation pipeline, then hashes the password and persists a
    ``User`` record. Violations are raised as :class:`ValidationError` and
    rendered by :func:`handle_validation_error`.
    """
    payload = (signup or SignupRequest()).as_payload()
    logger.info("Registration attempt for email: %s", payload.get("email"))

    violations = await pipeline.validate(payload)
    if violations:
        raise ValidationError(violations)

    hashed_password = await hasher.hash(payload["password"])
    await store.create(
        {
            "username": payload["username"],
            "email": payload["email"],
            "hashed_password": hashed_password,
        }
    )

    return SignupResponse(message=catalog.translate("userCreatedSuccess", locale))


@router.get("/health")
async def health() -> Dict[str, str]:
    """Health check endpoint returning the service status."""
    return {"status": "ok"}


def _validation_response(request: Request, violations: Dict[str, str]) -> JSONResponse:
    catalog: MessageCatalog = request.app.state.catalog
    body = ValidationErrorResponse(
        validation_errors=catalog.translate_all(violations, request_locale(request))
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=body.model_dump(by_alias=True),
    )


async def handle_validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    return _validation_response(request, exc.violations)


def request_violations(errors: Iterable[Mapping[str, Any]]) -> Dict[str, str]:
    """Map framework body errors to ``{field: message_key}``.

    Errors located on a signup field become that field's invalid key; any
    other error (malformed JSON, a body that is not an object) is reported
    once under ``body``. The result lists ``body`` first, then the fields in
    declaration order.
    """
    found: Dict[str, str] = {}
    for error in errors:
        loc = tuple(error.get("loc", ()))
        field = loc[1] if len(loc) > 1 and loc[0] == BODY_FIELD else None
        if field in INVALID_FIELD_KEYS:
            found.setdefault(field, INVALID_FIELD_KEYS[field])
        else:
            found.setdefault(BODY_FIELD, "bodyInvalid")
    order = (BODY_FIELD, *INVALID_FIELD_KEYS)
    return {name: found[name] for name in order if name in found}


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    violations = request_violations(exc.errors())
    logger.info("Signup body rejected before validation: %s", violations)
    return _validation_response(request, violations)


async def handle_conflict_error(request: Request, exc: ConflictError) -> JSONResponse:
    logger.warning("Registration lost a uniqueness race on %s", exc.field)
    return _validation_response(request, {exc.field: exc.message_key})


async def handle_storage_error(request: Request, exc: StorageError) -> JSONResponse:
    logger.error("Storage failure on %s: %s", request.url.path, exc)
    catalog: MessageCatalog = request.app.state.catalog
    body = ErrorResponse(message=catalog.translate("internalError", request_locale(request)))
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=body.model_dump(),
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application and its collaborators.

    ``settings`` defaults to :meth:`Settings.from_env`.
    """
    settings = settings or Settings.from_env()
    logging.getLogger().setLevel(settings.log_level)

    engine, session_factory = build_engine(settings.database_url, settings.database_echo)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.create_tables:
            await create_tables(engine)
        yield
        await engine.dispose()

    app = FastAPI(
        root_path=settings.root_path,
        title="Registration Service",
        lifespan=lifespan,
        docs_url="/docs",
        openapi_url="/openapi.json",
    )

    user_store = UserStore(session_factory)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = session_factory
    app.state.user_store = user_store
    app.state.pipeline = ValidationPipeline.for_store(user_store)
    app.state.password_hasher = PasswordHasher(settings.password_schemes)
    app.state.catalog = MessageCatalog.from_directory(
        settings.locales_dir, settings.default_locale
    )

    app.add_exception_handler(ValidationError, handle_validation_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(ConflictError, handle_conflict_error)
    app.add_exception_handler(StorageError, handle_storage_error)
    app.include_router(router)

    logger.info("Registration service configured (locales: %s)", ", ".join(app.state.catalog.locales))
    return app
