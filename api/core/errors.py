"""
Exception types and handlers shared by the API.

Every error body has the same top-level shape:

    {"success": false, "error": "<summary>", ...}

- request-shape problems (query or path) become 400 with `details`, one entry per field
- a well-formed lookup with no match becomes 404 with `message`
- store failures become a generic 500; the SQL and driver message stay in the logs
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class InvalidInput(ValueError):
    """
    A client-supplied value has the wrong shape, caught outside FastAPI's own
    parameter validation (e.g. a path id that has to be parsed by hand).
    """

    def __init__(self, error: str, *, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.error = error
        self.field = field
        self.message = message


class NotFound(LookupError):
    def __init__(self, error: str, *, message: str) -> None:
        super().__init__(message)
        self.error = error
        self.message = message


class StoreUnavailable(RuntimeError):
    """
    The database failed while serving a read. `operation` names what was
    being done, for the response body and the logs.
    """

    def __init__(self, operation: str) -> None:
        super().__init__(f"{operation} failed")
        self.operation = operation


def error_body(error: str, **extra: Any) -> dict[str, Any]:
    return {"success": False, "error": error, **extra}


def _field_name(loc: tuple | list) -> str:
    # ("query", "limit") -> "limit"; ("path", "user_id") -> "user_id"
    parts = [str(p) for p in loc if p not in ("query", "path", "body")]
    return ".".join(parts) or ".".join(str(p) for p in loc)


def validation_details(exc: RequestValidationError) -> list[dict[str, str]]:
    return [
        {"field": _field_name(err.get("loc", ())), "message": str(err.get("msg", ""))}
        for err in exc.errors()
    ]


async def handle_validation_error(_: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body("Invalid query parameters", details=validation_details(exc)),
    )


async def handle_invalid_input(_: Request, exc: InvalidInput) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(exc.error, details=[{"field": exc.field, "message": exc.message}]),
    )


async def handle_not_found(_: Request, exc: NotFound) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content=error_body(exc.error, message=exc.message),
    )


async def handle_store_unavailable(_: Request, exc: StoreUnavailable) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(f"Failed to {exc.operation}"),
    )


def install(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(InvalidInput, handle_invalid_input)
    app.add_exception_handler(NotFound, handle_not_found)
    app.add_exception_handler(StoreUnavailable, handle_store_unavailable)
