"""Ledger error taxonomy and the HTTP adapter's exception handlers.

``StorageUnavailable`` is fatal at startup. ``ValidationError`` and
``NotFound`` are recoverable: the caller re-prompts or refreshes its list.
Malformed stored values met during aggregation are never errors.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

logger = logging.getLogger("expense_ledger.errors")


class LedgerError(Exception):
    """Base class for errors raised by the ledger store."""


class StorageUnavailable(LedgerError, OSError):
    """The backing database file cannot be opened or initialized."""


class ValidationError(LedgerError, ValueError):
    """Caller supplied fields violate a record constraint; nothing was written."""

    def __init__(self, message: str, errors: Optional[List[Dict[str, str]]] = None):
        super().__init__(message)
        self.errors = errors or []


class NotFound(LedgerError, LookupError):
    """A mutation addressed an expense id that does not exist."""

    def __init__(self, expense_id: int):
        super().__init__(f"expense {expense_id} not found")
        self.expense_id = expense_id


def not_found_handler(request: Request, exc: Any):  # type: ignore
    if isinstance(exc, NotFound):
        detail = str(exc)
    elif getattr(exc, "status_code", 404) != 404:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": "http_error", "detail": exc.detail},
            headers=getattr(exc, "headers", None),
        )
    else:
        detail = getattr(exc, "detail", None) or (
            f"No route for {request.method} {request.url.path}"
        )
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"error": "not_found", "detail": detail},
    )


def validation_error_handler(request: Request, exc: Exception):  # type: ignore
    if isinstance(exc, RequestValidationError):
        detail: Any = [
            {"field": ".".join(str(p) for p in e.get("loc", ())), "message": e.get("msg", "")}
            for e in exc.errors()
        ]
    else:
        detail = getattr(exc, "errors", None) or [{"field": "", "message": str(exc)}]
    return JSONResponse(
        status_code=422,
        content={"error": "validation_error", "detail": detail},
    )


def server_error_handler(request: Request, exc: Exception):  # type: ignore
    logger.error("unhandled exception", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "internal_error",
            "detail": "An unexpected error occurred.",
        },
    )
