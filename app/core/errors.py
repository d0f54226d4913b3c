"""
Error taxonomy for the job board API.

Services raise these; the handler registered in app.main renders them as
{"success": false, "error": <message>} with the matching HTTP status.
"""
from typing import Optional
from fastapi import status


class AppError(Exception):
    """Base class for classified application errors."""
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationFailed(AppError):
    """Missing or invalid request fields, rejected uploads."""
    status_code = status.HTTP_400_BAD_REQUEST


class Unauthorized(AppError):
    """Missing, invalid or stale bearer token; bad login."""
    status_code = status.HTTP_401_UNAUTHORIZED


class PaymentRequired(AppError):
    """No job credits left, or checkout session not paid."""
    status_code = status.HTTP_402_PAYMENT_REQUIRED


class Forbidden(AppError):
    """Caller does not own the resource."""
    status_code = status.HTTP_403_FORBIDDEN


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class Conflict(AppError):
    """Duplicate application or already-terminal withdrawal."""
    status_code = status.HTTP_409_CONFLICT


class UpstreamServiceError(AppError):
    """Model provider, media host or payment processor failed."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
