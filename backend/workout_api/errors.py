"""
Error types for the workout API and the handlers that render them.

Every failure reaches the client as ``{"error": "<message>"}`` with a
4xx status for bad input and a 5xx status for provider failures.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException


class WorkoutAPIError(Exception):
    """Base class for errors reported to the client."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class MissingInputError(WorkoutAPIError):
    """A required form field or body was not sent."""

    status_code = 400


class UpstreamServiceError(WorkoutAPIError):
    """The transcription or text-generation provider failed."""

    status_code = 500


def _first_validation_message(exc: RequestValidationError) -> str:
    for error in exc.errors():
        message = error.get("msg")
        if message:
            return f"Invalid request body: {message}"
    return "Invalid request body"


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(WorkoutAPIError)
    async def workout_error_handler(_request: Request, exc: WorkoutAPIError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.warning(f"Rejected malformed request to {request.url.path}: {exc.errors()}")
        return JSONResponse(
            status_code=400, content={"error": _first_validation_message(exc)}
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(
        _request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.opt(exception=exc).error(f"Unhandled error in {request.url.path}")
        return JSONResponse(
            status_code=500,
            content={"error": str(exc) or "An unknown error occurred"},
        )
