# backend-server/app/core/errors.py
# Domain errors raised by the services and mapped to HTTP responses in main.py
from fastapi import Request, status
from fastapi.responses import JSONResponse


class AppError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidStatus(ValidationError):
    def __init__(self, message: str = "Invalid status provided."):
        super().__init__(message)


class InvalidTransition(AppError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, current: str, requested: str):
        super().__init__(f'Cannot change status from "{current}" to "{requested}".')
        self.current = current
        self.requested = requested


class Conflict(AppError):
    status_code = status.HTTP_400_BAD_REQUEST


class AuthorizationError(AppError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})
