"""Domain error taxonomy shared by services, crud and routers.

``register_exception_handlers`` maps each class to a status code once for the
whole app, so services can raise them without knowing about HTTP.
"""
from dataclasses import dataclass

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from app.core.logging import logger


@dataclass(frozen=True)
class FieldError:
    path: str
    message: str

    def as_dict(self) -> dict:
        return {"loc": self.path.split("."), "msg": self.message}


class DomainError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class StructuralError(DomainError):
    """Malformed input shape: empty file, missing header columns, bad upload."""


class ValidationError(DomainError):
    """One or more field rules failed; ``errors`` holds every failure, not just the first."""

    status_code = 422

    def __init__(self, errors: list[FieldError]):
        super().__init__("; ".join(f"{e.path}: {e.message}" for e in errors))
        self.errors = errors


class ReferentialError(DomainError):
    status_code = 409


class NotFoundError(DomainError):
    status_code = 404


def _domain_error_handler(_request: Request, exc: DomainError) -> JSONResponse:
    if isinstance(exc, ValidationError):
        return JSONResponse(status_code=exc.status_code, content={"detail": [e.as_dict() for e in exc.errors]})
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def _integrity_error_handler(_request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning("integrity_error", error=str(exc.orig))
    return JSONResponse(
        status_code=ReferentialError.status_code,
        content={"detail": "Persistence failure: referenced row is missing or still in use"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, _domain_error_handler)
    app.add_exception_handler(IntegrityError, _integrity_error_handler)
