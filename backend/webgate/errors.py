"""
Application Error Classes

Centralized error handling with the JSON envelope every route returns:
``{"success": false, "message": "..."}``.

Usage:
    from webgate.errors import AppError, Errors

    # Raise a validation error with the message the client sees
    raise Errors.validation("Email and password are required")

    # Raise a storage failure; details are only logged
    raise Errors.persistence("Server error during signup", details=str(exc))
"""
from typing import Optional, Any
from uuid import uuid4


# Error code type
ErrorCode = str


class AppError(Exception):
    """
    Application error class for consistent error handling.

    Attributes:
        code: Error code (e.g., 'VALIDATION_ERROR', 'AUTH_ERROR')
        status: HTTP status code
        message: Client-facing message; defaults to a generic one per code
        details: Additional error details (for internal logging)
        request_id: UUID for request tracing
    """

    def __init__(
        self,
        code: ErrorCode,
        status: int,
        message: Optional[str] = None,
        details: Optional[Any] = None,
        request_id: Optional[str] = None,
    ):
        self.code = code
        self.status = status
        self.message = message or _PUBLIC_MESSAGES.get(
            code, _PUBLIC_MESSAGES["INTERNAL_ERROR"]
        )
        self.details = details
        self.request_id = request_id or str(uuid4())
        self.name = "AppError"
        super().__init__(code)

    def to_dict(self, is_production: bool = True) -> dict:
        """
        Convert error to the response envelope.

        Args:
            is_production: If True, hide internal details

        Returns:
            Error response dictionary
        """
        response = {
            "success": False,
            "message": self.message,
            "requestId": self.request_id,
        }

        # Include details in non-production
        if not is_production and self.details:
            response["details"] = self.details

        return response


_PUBLIC_MESSAGES = {
    "VALIDATION_ERROR": "Invalid request",
    "AUTH_ERROR": "Invalid or expired token",
    "NOT_FOUND_ERROR": "Not found",
    "CONFLICT_ERROR": "Request conflicts with the current state",
    "PERSISTENCE_ERROR": "Server error",
    "INTERNAL_ERROR": "Internal server error",
}


class Errors:
    """Factory class for creating AppError instances."""

    @staticmethod
    def validation(message: Optional[str] = None, details: Optional[Any] = None) -> AppError:
        """Create validation error (400)."""
        return AppError("VALIDATION_ERROR", 400, message, details)

    @staticmethod
    def auth(message: Optional[str] = None) -> AppError:
        """Create authentication error (401)."""
        return AppError("AUTH_ERROR", 401, message)

    @staticmethod
    def not_found(message: Optional[str] = None) -> AppError:
        """Create not found error (404)."""
        return AppError("NOT_FOUND_ERROR", 404, message)

    @staticmethod
    def conflict(message: Optional[str] = None) -> AppError:
        """Create conflict error (409)."""
        return AppError("CONFLICT_ERROR", 409, message)

    @staticmethod
    def persistence(message: Optional[str] = None, details: Optional[Any] = None) -> AppError:
        """Create storage failure error (500)."""
        return AppError("PERSISTENCE_ERROR", 500, message, details)

    @staticmethod
    def internal(details: Optional[Any] = None) -> AppError:
        """Create internal server error (500)."""
        return AppError("INTERNAL_ERROR", 500, details=details)
