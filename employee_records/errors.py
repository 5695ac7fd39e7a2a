# errors.py
"""Typed errors for the employee API and the handlers that turn them into JSON.

Not-found answers with ``{"message": ...}``; storage failures answer with
``{"error": ...}`` carrying the raw database text.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class EmployeeRecordsError(Exception):
    """Base class for errors that map onto an HTTP response."""

    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_response(self) -> dict:
        return {"error": self.message}


class EmployeeNotFoundError(EmployeeRecordsError):
    http_status = status.HTTP_404_NOT_FOUND
    code = "EMPLOYEE_NOT_FOUND"

    def __init__(self, employee_id: int):
        super().__init__("Employee not found")
        self.employee_id = employee_id

    def to_response(self) -> dict:
        return {"message": self.message}


class StorageError(EmployeeRecordsError):
    """A database statement failed. ``message`` is the driver's own text."""

    code = "DATABASE_ERROR"

    def __init__(self, message: str, operation: str = "query"):
        super().__init__(message)
        self.operation = operation


async def handle_records_error(request: Request, exc: EmployeeRecordsError) -> JSONResponse:
    # 404s are routine; StorageError was already logged by the store.
    if exc.http_status >= 500 and not isinstance(exc, StorageError):
        logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(exc.to_response(), status_code=exc.http_status)


async def handle_bad_request(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = [
        {"field": ".".join(map(str, problem["loc"])), "message": problem["msg"]}
        for problem in exc.errors()
    ]
    logger.warning(f"Rejected {request.method} {request.url.path}: {problems}")
    return JSONResponse(
        {"error": "Invalid request data", "details": problems},
        status_code=status.HTTP_400_BAD_REQUEST,
    )


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(
        {"error": "Internal server error"},
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


EXCEPTION_HANDLERS = {
    EmployeeRecordsError: handle_records_error,
    RequestValidationError: handle_bad_request,
    Exception: handle_unexpected,
}


def register_error_handlers(app: FastAPI) -> None:
    for exc_class, handler in EXCEPTION_HANDLERS.items():
        app.add_exception_handler(exc_class, handler)
