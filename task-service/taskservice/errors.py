import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

log = logging.getLogger(__name__)


class TaskError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(TaskError):
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(TaskError):
    status_code = status.HTTP_404_NOT_FOUND


class StoreError(TaskError):
    """Raised when the backing Redis instance fails a command."""


class ConfigError(Exception):
    pass


def _message(content: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": content})


def _validation_message(error: dict) -> str:
    ctx_error = (error.get("ctx") or {}).get("error")
    if ctx_error is not None:
        return str(ctx_error)
    return error.get("msg", "Invalid request")


async def task_error_handler(request: Request, exc: TaskError):
    log.warning("%s %s -> %s %s", request.method, request.url.path, exc.status_code, exc.message)
    return _message(exc.message, exc.status_code)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    log.warning("Rejected request %s %s: %s", request.method, request.url.path, errors)
    if any(err.get("loc", ())[:1] == ("path",) for err in errors):
        return _message("Invalid task ID", status.HTTP_404_NOT_FOUND)
    if not errors:
        return _message("Invalid request", status.HTTP_400_BAD_REQUEST)
    return _message(_validation_message(errors[0]), status.HTTP_400_BAD_REQUEST)


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    # routing failures (unknown path or unsupported method) both read as 404
    if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
        return _message("Route not found", status.HTTP_404_NOT_FOUND)
    return _message(str(exc.detail), exc.status_code)


async def unhandled_error_handler(request: Request, exc: Exception):
    log.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _message("Something went wrong!", status.HTTP_500_INTERNAL_SERVER_ERROR)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TaskError, task_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
