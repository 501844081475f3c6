"""
origin_registry.errors

Domain error taxonomy.

Responsibilities:
- Give services a small set of exceptions that map onto HTTP outcomes.
- Carry collected field errors for validation failures.

Authorization and not-found failures intentionally share a status code (401)
so callers cannot discover the existence of other users' resources.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class FieldError:
    # `path` follows form field naming, e.g. "children[2].capacity".
    path: str
    message: str

    def as_dict(self) -> dict[str, str]:
        return {"path": self.path, "message": self.message}


class OriginError(Exception):
    status_code: int = 500
    detail: str = "Internal error"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or self.detail)
        if detail is not None:
            self.detail = detail


class ValidationError(OriginError):
    status_code = 400
    detail = "Validation failed"

    def __init__(self, errors: Iterable[FieldError], detail: str | None = None) -> None:
        super().__init__(detail)
        self.errors: tuple[FieldError, ...] = tuple(errors)


class ConflictError(OriginError):
    status_code = 409
    detail = "Conflict"


class AuthenticationError(OriginError):
    status_code = 401
    detail = "Unauthorized"


class AuthorizationError(OriginError):
    status_code = 401
    detail = "Unauthorized"


class NotFoundError(AuthorizationError):
    pass
