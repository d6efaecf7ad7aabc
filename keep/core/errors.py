# keep/core/errors.py
"""
Stable user-facing error categories.

Services raise `HTTPException` directly; anything coming back from the
store or the object storage is funnelled through the helpers here so that
raw backend codes never reach clients.

    403  access denied (also used for records that do not exist)
    401  authentication required
    409  uniqueness / referential conflicts
    400  missing required values, business-rule validation
    413  / 415 / 507 / 502  storage failures
    422  request validation (field errors)
"""

import logging

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

logger = logging.getLogger(__name__)

ACCESS_DENIED_DETAIL = "Access denied"

UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"
NOT_NULL_VIOLATION = "23502"


def access_denied() -> HTTPException:
    """
    Uniform denial. Callers must use this both for "not yours" and for
    "does not exist" so record ids cannot be probed.
    """
    return HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail=ACCESS_DENIED_DETAIL,
    )


def authentication_required() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Authentication required",
    )


def validation_failed(errors: list[str]) -> HTTPException:
    """
    Business-rule validation that pydantic cannot express on its own.
    """
    if len(errors) == 1:
        detail = errors[0]
    else:
        detail = "Please fix the following issues: " + "; ".join(errors)
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def _sqlstate(exc: IntegrityError) -> str | None:
    orig = exc.orig
    # psycopg2 exposes pgcode, psycopg 3 exposes sqlstate
    return getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)


def translate_integrity_error(exc: IntegrityError, operation: str) -> HTTPException:
    """
    Map a constraint violation to one of the stable categories.

    SQLSTATE is used when the driver provides it (Postgres); otherwise the
    driver message is inspected (SQLite).
    """
    code = _sqlstate(exc)
    message = str(exc.orig).lower()
    logger.warning("Integrity error during %s: %s", operation, code or message)

    if code == UNIQUE_VIOLATION or "unique" in message or "duplicate" in message:
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="This record already exists. Please use different values.",
        )
    if code == FOREIGN_KEY_VIOLATION or "foreign key" in message:
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Cannot perform this operation due to related records.",
        )
    if code == NOT_NULL_VIOLATION or "not null" in message:
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Required fields are missing.",
        )
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="A database error occurred.",
    )


def is_unique_violation(exc: IntegrityError) -> bool:
    code = _sqlstate(exc)
    message = str(exc.orig).lower()
    return code == UNIQUE_VIOLATION or "unique" in message or "duplicate" in message


def translate_storage_error(exc: Exception, operation: str) -> HTTPException:
    """
    Map an object-storage failure to a specific user message.
    """
    message = str(exc).lower()
    logger.error("Storage error during %s: %s", operation, exc)

    if "bucket not found" in message:
        return HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Storage configuration error. Please contact support.",
        )
    if "too large" in message or "file size" in message or "payload" in message:
        return HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail="File is too large. Maximum size is 10MB.",
        )
    if "mime" in message or "file type" in message:
        return HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail="File type not supported. Please use a different format.",
        )
    if "quota" in message:
        return HTTPException(
            status_code=status.HTTP_507_INSUFFICIENT_STORAGE,
            detail="Storage quota exceeded. Please delete some files.",
        )
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail="File operation failed. Please try again.",
    )


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = []
        for err in exc.errors():
            loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
            errors.append({"field": ".".join(loc) or None, "message": err.get("msg", "")})
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": "Validation failed", "errors": errors},
        )
