"""
Custom Exception Classes for Stream CMS

This module defines custom exceptions for better error handling and
consistent error responses across the application.
"""

import enum
from typing import Any

from fastapi import status


class ErrorCode(str, enum.Enum):
    """Machine-readable error codes returned in the error envelope."""

    AUTH_FAILED = "AUTH_FAILED"
    AUTH_PERMISSION_DENIED = "AUTH_PERMISSION_DENIED"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    RESOURCE_MOVIE_NOT_FOUND = "RESOURCE_MOVIE_NOT_FOUND"
    RESOURCE_CATEGORY_NOT_FOUND = "RESOURCE_CATEGORY_NOT_FOUND"
    RESOURCE_COMMENT_NOT_FOUND = "RESOURCE_COMMENT_NOT_FOUND"
    RESOURCE_USER_NOT_FOUND = "RESOURCE_USER_NOT_FOUND"
    RESOURCE_IN_USE = "RESOURCE_IN_USE"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    VALIDATION_DUPLICATE_RESOURCE = "VALIDATION_DUPLICATE_RESOURCE"
    UPLOAD_FAILED = "UPLOAD_FAILED"
    UPLOAD_INVALID_TYPE = "UPLOAD_INVALID_TYPE"
    UPLOAD_TOO_LARGE = "UPLOAD_TOO_LARGE"
    DATABASE_ERROR = "DATABASE_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class CMSException(Exception):
    """Base exception class for all CMS-related exceptions"""

    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: dict[str, Any] | None = None,
        error_code: ErrorCode | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        if error_code is not None:
            self.error_code = error_code
        super().__init__(self.message)


# ============================================================================
# Authentication & Authorization Exceptions
# ============================================================================


class AuthenticationError(CMSException):
    """Raised when authentication fails"""

    error_code = ErrorCode.AUTH_FAILED

    def __init__(self, message: str = "Authentication failed", details: dict[str, Any] | None = None):
        super().__init__(message=message, status_code=status.HTTP_401_UNAUTHORIZED, details=details or {})


class InvalidCredentialsError(AuthenticationError):
    """Raised when login credentials are invalid"""

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message=message)


class AuthorizationError(CMSException):
    """Raised when user lacks permission for an action"""

    error_code = ErrorCode.AUTH_PERMISSION_DENIED

    def __init__(self, message: str = "You do not have permission to perform this action", required_role: str | None = None):
        details = {"required_role": required_role} if required_role else {}
        super().__init__(message=message, status_code=status.HTTP_403_FORBIDDEN, details=details)


# ============================================================================
# Resource Not Found Exceptions
# ============================================================================


class ResourceNotFoundError(CMSException):
    """Base class for resource not found errors"""

    error_code = ErrorCode.RESOURCE_NOT_FOUND

    def __init__(self, resource_type: str, resource_id: Any | None = None, lookup_field: str = "id"):
        message = f"{resource_type} not found"
        if resource_id is not None:
            message = f"{resource_type} with {lookup_field} '{resource_id}' not found"
        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            details={"resource_type": resource_type, "resource_id": resource_id},
        )


class MovieNotFoundError(ResourceNotFoundError):
    """Raised when a movie is missing, or hidden from the public because it is unpublished"""

    error_code = ErrorCode.RESOURCE_MOVIE_NOT_FOUND

    def __init__(self, slug: str | None = None, movie_id: int | None = None):
        if slug is not None:
            super().__init__(resource_type="Movie", resource_id=slug, lookup_field="slug")
        else:
            super().__init__(resource_type="Movie", resource_id=movie_id)


class CategoryNotFoundError(ResourceNotFoundError):
    error_code = ErrorCode.RESOURCE_CATEGORY_NOT_FOUND

    def __init__(self, slug: str | None = None):
        super().__init__(resource_type="Category", resource_id=slug, lookup_field="slug")


class CommentNotFoundError(ResourceNotFoundError):
    error_code = ErrorCode.RESOURCE_COMMENT_NOT_FOUND

    def __init__(self, comment_id: int | None = None):
        super().__init__(resource_type="Comment", resource_id=comment_id)


class UserNotFoundError(ResourceNotFoundError):
    error_code = ErrorCode.RESOURCE_USER_NOT_FOUND

    def __init__(self, user_id: Any | None = None):
        super().__init__(resource_type="User", resource_id=user_id)


# ============================================================================
# Validation & Business Logic Exceptions
# ============================================================================


class ValidationError(CMSException):
    """Raised when input validation fails"""

    error_code = ErrorCode.VALIDATION_FAILED

    def __init__(self, message: str, field: str | None = None, details: dict[str, Any] | None = None):
        error_details = details or {}
        if field:
            error_details["field"] = field
        super().__init__(message=message, status_code=status.HTTP_400_BAD_REQUEST, details=error_details)


class DuplicateResourceError(CMSException):
    """Raised when attempting to create a duplicate resource"""

    error_code = ErrorCode.VALIDATION_DUPLICATE_RESOURCE

    def __init__(self, resource_type: str, field: str, value: Any):
        super().__init__(
            message=f"{resource_type} with {field} '{value}' already exists",
            status_code=status.HTTP_409_CONFLICT,
            details={"resource_type": resource_type, "field": field, "value": value},
        )


class ResourceInUseError(CMSException):
    """Raised when deleting a resource that other records still reference"""

    error_code = ErrorCode.RESOURCE_IN_USE

    def __init__(self, resource_type: str, resource_id: Any, dependents: str, count: int):
        super().__init__(
            message=f"Cannot delete {resource_type.lower()} with associated {dependents}",
            status_code=status.HTTP_409_CONFLICT,
            details={"resource_type": resource_type, "resource_id": resource_id, dependents: count},
        )


# ============================================================================
# Database Exceptions
# ============================================================================


class DatabaseError(CMSException):
    """Raised when a database operation fails"""

    error_code = ErrorCode.DATABASE_ERROR

    def __init__(self, message: str = "A database error occurred", operation: str | None = None):
        details = {"operation": operation} if operation else {}
        super().__init__(message=message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, details=details)


# ============================================================================
# File & Media Exceptions
# ============================================================================


class FileUploadError(CMSException):
    """Raised when file upload fails"""

    error_code = ErrorCode.UPLOAD_FAILED

    def __init__(self, message: str = "File upload failed", filename: str | None = None):
        details = {"filename": filename} if filename else {}
        super().__init__(message=message, status_code=status.HTTP_400_BAD_REQUEST, details=details)


class InvalidFileTypeError(CMSException):
    """Raised when uploaded file type is not allowed"""

    error_code = ErrorCode.UPLOAD_INVALID_TYPE

    def __init__(self, file_type: str | None, allowed_types: list[str]):
        super().__init__(
            message="Invalid file type. Only JPEG, PNG, and WebP are allowed.",
            status_code=status.HTTP_400_BAD_REQUEST,
            details={"file_type": file_type, "allowed_types": allowed_types},
        )


class FileTooLargeError(CMSException):
    error_code = ErrorCode.UPLOAD_TOO_LARGE

    def __init__(self, size: int, max_size: int):
        super().__init__(
            message=f"File too large. Maximum size is {max_size // (1024 * 1024)}MB.",
            status_code=status.HTTP_400_BAD_REQUEST,
            details={"size": size, "max_size": max_size},
        )
