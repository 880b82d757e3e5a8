"""
Error taxonomy for the catalog service and its HTTP mapping.

Services raise the exceptions defined here; endpoints do not catch
them.  ``register_exception_handlers`` installs handlers on the
FastAPI application which turn every ``CatalogError`` into a JSON body
of the form ``{"error": ..., "details": {...}}`` with the matching
status code.  Request validation failures raised by FastAPI itself
(a missing query parameter, a body that is not a JSON object) are
reported through the same envelope as ``400 Bad Request`` so that all
input problems look alike to clients.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


logger = logging.getLogger(__name__)


class CatalogError(Exception):
    """Base exception for catalog errors."""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details or {}


class InvalidInputError(CatalogError):
    """Raised for a malformed identity or a missing required field."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_400_BAD_REQUEST, details)


class NotFoundError(CatalogError):
    """Raised when a referenced document does not exist."""

    def __init__(self, kind: str, doc_id: int):
        super().__init__(
            f"{kind} {doc_id} not found",
            status.HTTP_404_NOT_FOUND,
            {"id": doc_id},
        )


class StorageError(CatalogError):
    """Raised when the persistence layer fails unexpectedly.

    The underlying error is logged by the service that caught it; the
    client only sees a generic message.
    """

    def __init__(self, operation: str):
        super().__init__(
            "Internal server error",
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            {"operation": operation},
        )


async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.details)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, "details": exc.details},
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "Invalid request",
            "details": {"errors": jsonable_encoder(exc.errors())},
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the catalog error handlers to ``app``."""
    app.add_exception_handler(CatalogError, catalog_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
