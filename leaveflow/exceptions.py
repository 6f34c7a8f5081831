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

    default_status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code if status_code is not None else self.default_status_code
        super().__init__(self.message)


class ValidationError(AppError):
    """Malformed or out-of-range input. Never partially applied."""

    default_status_code = status.HTTP_422_UNPROCESSABLE_ENTITY


class PolicyViolation(AppError):
    """The request breaks a leave-policy rule (notice period, max days, applicability)."""

    default_status_code = status.HTTP_400_BAD_REQUEST


class InsufficientBalance(AppError):
    """Not enough available days on the balance."""

    default_status_code = status.HTTP_400_BAD_REQUEST


class InvalidStateTransition(AppError):
    """The request is not in a state that allows the operation."""

    default_status_code = status.HTTP_409_CONFLICT


class Forbidden(AppError):
    """The actor lacks the role or scope for the operation."""

    default_status_code = status.HTTP_403_FORBIDDEN


class NotFound(AppError):
    """A referenced request, policy, employee or balance does not exist."""

    default_status_code = status.HTTP_404_NOT_FOUND


class ConcurrencyConflict(AppError):
    """A competing transaction invalidated the preconditions. Safe to retry."""

    default_status_code = status.HTTP_409_CONFLICT


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
