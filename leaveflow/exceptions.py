from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response schema."""

    error: str
    detail: str | None = None
    status_code: int


class AppError(Exception):
    """Base application exception."""

    def __init__(self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class NotEnoughDaysError(AppError):
    """The requester's holiday pool does not cover the requested period."""

    def __init__(self, remaining: float, required: float) -> None:
        self.remaining = remaining
        self.required = required
        super().__init__(
            f"Not enough days in the holiday pool: {remaining:g} remaining, {required:g} required",
            status_code=status.HTTP_400_BAD_REQUEST,
        )


class RequestOverlappingError(AppError):
    """The requested period shares at least one day with an active request."""

    def __init__(self) -> None:
        super().__init__(
            "Request overlaps with an existing pending or accepted request",
            status_code=status.HTTP_409_CONFLICT,
        )


class InvalidRequestPeriodError(AppError):
    """The period ends before it starts or starts too far in the past."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=status.HTTP_400_BAD_REQUEST)


async def _app_exception_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=type(exc).__name__,
            detail=exc.message,
            status_code=exc.status_code,
        ).model_dump(),
    )


async def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=ErrorResponse(
            error="ValidationError",
            detail=str(exc.errors()),
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        ).model_dump(),
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers on the application."""
    app.add_exception_handler(AppError, _app_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)  # type: ignore[arg-type]
