"""Typed API errors.

Services raise these where a plain ``HTTPException`` would otherwise be
raised. Each one carries a machine-readable ``code`` that the handler in
``orquesta.main`` puts next to the human-readable ``detail``::

    {"error": "conflict", "detail": "El instrumento no está disponible para asignación."}
"""
from fastapi import HTTPException


class OrquestaError(HTTPException):
    status_code = 500
    code = "internal"

    def __init__(self, detail: str, headers: dict[str, str] | None = None):
        super().__init__(status_code=self.status_code, detail=detail, headers=headers)


class ValidationError(OrquestaError):
    status_code = 400
    code = "validation_error"


class UnauthorizedError(OrquestaError):
    status_code = 401
    code = "unauthorized"

    def __init__(self, detail: str):
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class ForbiddenError(OrquestaError):
    status_code = 403
    code = "forbidden"


class NotFoundError(OrquestaError):
    status_code = 404
    code = "not_found"


class ConflictError(OrquestaError):
    status_code = 409
    code = "conflict"


class RateLimitError(OrquestaError):
    status_code = 429
    code = "rate_limited"
