"""
Custom domain exceptions for consistent error handling.

These exceptions are mapped to the error envelope by the HTTPException
handler in main.py. The error code is derived from the class name
(NotFoundError -> "notfound").
"""
from fastapi import HTTPException, status


class DomainError(HTTPException):
    """Base class for all domain-specific errors."""
    def __init__(self, message: str, status_code: int = status.HTTP_400_BAD_REQUEST, details: dict | None = None):
        super().__init__(status_code=status_code, detail=message)
        self.message = message
        self.details = details or {}


class NotFoundError(DomainError):
    """Resource not found in the given store (404)."""
    def __init__(self, resource_type: str, identifier: str, store_id: str | None = None):
        message = f"{resource_type} not found: {identifier}"
        details = {"resource": resource_type.lower(), "id": identifier}
        if store_id:
            details["storeId"] = store_id
        super().__init__(message, status_code=status.HTTP_404_NOT_FOUND, details=details)


class ValidationError(DomainError):
    """Validation error (400)."""
    def __init__(self, message: str, field: str | None = None, details: dict | None = None):
        if field:
            message = f"Validation error on {field}: {message}"
        super().__init__(message, status_code=status.HTTP_400_BAD_REQUEST, details=details)


class PermissionDeniedError(DomainError):
    """Caller does not own the store (403)."""
    def __init__(self, message: str = "Permission denied", details: dict | None = None):
        super().__init__(message, status_code=status.HTTP_403_FORBIDDEN, details=details)


class UnauthorizedError(DomainError):
    """Missing or invalid access token (401)."""
    def __init__(self, message: str = "Unauthenticated", details: dict | None = None):
        super().__init__(message, status_code=status.HTTP_401_UNAUTHORIZED, details=details)


class ConflictError(DomainError):
    """
    Referential conflict (409).

    Raised when deleting a row that other rows still point at, e.g. a
    billboard that categories are still shown under.
    """
    def __init__(self, message: str, dependents: str | None = None, count: int | None = None):
        details = {}
        if dependents:
            details["dependents"] = dependents
        if count is not None:
            details["count"] = count
        super().__init__(message, status_code=status.HTTP_409_CONFLICT, details=details)
