# runi/core/errors.py
"""
Typed failures raised by the authorization core.

Each carries the HTTP status and a machine-readable code; runi.main turns
them into {"detail": {"code": ..., "message": ...}} responses.
"""
from __future__ import annotations

from typing import Any, Optional

from fastapi import status


class AuthzError(Exception):
    status_code: int = status.HTTP_400_BAD_REQUEST
    code: str = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_detail(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message}


class Unauthenticated(AuthzError):
    """No identity could be resolved: missing/invalid/expired token or disabled account."""

    status_code = status.HTTP_401_UNAUTHORIZED
    code = "unauthenticated"


class InvalidCredentials(Unauthenticated):
    code = "invalid_credentials"

    def __init__(self, message: str = "invalid email or password") -> None:
        super().__init__(message)


class PermissionDenied(AuthzError):
    """An authenticated staff member lacks the named permission."""

    status_code = status.HTTP_403_FORBIDDEN
    code = "permission_denied"

    def __init__(self, permission_key: str, message: Optional[str] = None) -> None:
        super().__init__(message or f"You do not have permission to perform this action ({permission_key})")
        self.permission_key = permission_key

    def to_detail(self) -> dict[str, Any]:
        detail = super().to_detail()
        detail["missing"] = self.permission_key
        return detail


class Conflict(AuthzError):
    status_code = status.HTTP_409_CONFLICT
    code = "conflict"


class NotFound(AuthzError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"
