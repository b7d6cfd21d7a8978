"""Application-wide exception hierarchy.

Services raise these; the handlers registered in ``ppob_api.main`` turn
them into JSON responses carrying ``status_code``.
"""
from typing import Any, Dict, Optional


class AppError(Exception):
    """Base application error."""

    status_code = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        result = {"success": False, "message": self.message}
        if self.details:
            result["details"] = self.details
        return result


class ValidationError(AppError):
    """Missing or malformed input."""

    status_code = 400


class AuthenticationError(AppError):
    """Missing, invalid or expired credentials."""

    status_code = 401


class AuthorizationError(AppError):
    """Valid identity without the required role."""

    status_code = 403


class NotFoundError(AppError):
    status_code = 404


class ConflictError(AppError):
    status_code = 409


class ProviderError(AppError):
    """The upstream voucher provider failed or answered unexpectedly."""

    status_code = 500
