"""
Domain exceptions for the snag tracker API
==========================================

Repositories and the auth layer raise these instead of HTTPException so
that the HTTP mapping lives in one place (the handlers registered in
``main.py``). Each error carries a stable ``code`` and the HTTP status it
resolves to.

Usage:
    from core.exceptions import ConflictError

    raise ConflictError("Email already in use.")
"""

from typing import Any, Dict, Optional


class SnagTrackerError(Exception):
    """Base exception for all snag tracker errors"""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.message,
            "code": self.code,
            "details": self.details,
        }


# ============================================
# Input errors (400-type)
# ============================================

class ValidationError(SnagTrackerError):
    """Missing or malformed input"""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="VALIDATION_ERROR", details=details)


class ConflictError(SnagTrackerError):
    """Uniqueness violation"""

    status_code = 400

    def __init__(self, message: str = "Resource already exists"):
        super().__init__(message, code="CONFLICT")


class AuthError(SnagTrackerError):
    """Credential mismatch. Same message for unknown user and wrong password."""

    status_code = 400

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message, code="INVALID_CREDENTIALS")


# ============================================
# Authentication & Authorization Errors
# ============================================

class NotAuthenticatedError(SnagTrackerError):
    """No identity presented"""

    status_code = 401

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message, code="NOT_AUTHENTICATED")


class NotAuthorizedError(SnagTrackerError):
    """Identity presented but rejected"""

    status_code = 403

    def __init__(self, message: str = "Not authorized", code: str = "NOT_AUTHORIZED"):
        super().__init__(message, code=code)


class TokenError(SnagTrackerError):
    """Token signature, structure or claims are invalid"""

    status_code = 403

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message, code="INVALID_TOKEN")


class TokenExpiredError(TokenError):
    """Token is past its expiry"""

    def __init__(self):
        super().__init__("Token has expired")
        self.code = "TOKEN_EXPIRED"


# ============================================
# Resource Errors (404-type)
# ============================================

class ResourceNotFoundError(SnagTrackerError):
    """Base class for not found errors"""

    status_code = 404

    def __init__(self, resource_type: str, resource_id: Any):
        super().__init__(
            f"{resource_type} not found",
            code=f"{resource_type.upper()}_NOT_FOUND",
            details={"resource_type": resource_type, "resource_id": resource_id},
        )


class ProjectNotFoundError(ResourceNotFoundError):
    def __init__(self, project_id: Any):
        super().__init__("Project", project_id)


class SnagNotFoundError(ResourceNotFoundError):
    def __init__(self, snag_id: Any):
        super().__init__("Snag", snag_id)


# ============================================
# Storage Errors
# ============================================

class StorageError(SnagTrackerError):
    """Unexpected persistence failure. The message never carries driver output."""

    status_code = 500

    def __init__(self, message: str = "Server error", operation: Optional[str] = None):
        details = {"operation": operation} if operation else {}
        super().__init__(message, code="STORAGE_ERROR", details=details)


def error_response(error: SnagTrackerError) -> Dict[str, Any]:
    """Convert exception to API error response body"""
    return error.to_dict()
