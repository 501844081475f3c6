"""
origin_registry.api.errors

Exception handlers translating domain errors into HTTP responses.

Responsibilities:
- Render collected field errors as `{detail, errors: [{path, message}]}` (400).
- Render authorization and not-found failures as an opaque 401.
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.status import HTTP_400_BAD_REQUEST

from origin_registry.errors import AuthorizationError, FieldError, OriginError, ValidationError
from origin_registry.observability.logging import get_logger

log = get_logger(__name__)


def _validation_response(errors: list[FieldError] | tuple[FieldError, ...]) -> JSONResponse:
    return JSONResponse(
        status_code=HTTP_400_BAD_REQUEST,
        content={"detail": "Validation failed", "errors": [e.as_dict() for e in errors]},
    )


async def origin_error_handler(_request: Request, exc: OriginError) -> JSONResponse:
    if isinstance(exc, ValidationError):
        return _validation_response(exc.errors)
    if isinstance(exc, AuthorizationError):
        # Never reveal why access was denied or whether the resource exists.
        return JSONResponse(status_code=exc.status_code, content={"detail": "Unauthorized"})
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


def _format_loc(loc: tuple[int | str, ...]) -> str:
    """("body", "children", 0, "capacity") -> "children[0].capacity"."""
    if loc and loc[0] in ("body", "query", "path"):
        loc = loc[1:]
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}" if path else str(part)
    return path or "root"


async def request_validation_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = []
    for err in exc.errors():
        errors.append(
            FieldError(path=_format_loc(tuple(err.get("loc", ()))), message=err.get("msg", ""))
        )
    log.info("request_validation_failed", paths=[e.path for e in errors])
    return _validation_response(errors)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(OriginError, origin_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, request_validation_handler)  # type: ignore[arg-type]
