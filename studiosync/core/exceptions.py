"""
Custom Exceptions for the StudioSync fee core

This module defines custom exception classes used throughout the package
for better error handling and debugging.
"""

from typing import Any, Dict, List, Optional
from enum import Enum


class ErrorCode(str, Enum):
    """Standard error codes for the application"""
    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Fee domain errors
    INVALID_ASSOCIATION = "INVALID_ASSOCIATION"
    INVALID_FEE = "INVALID_FEE"
    STUDENT_NOT_FOUND = "STUDENT_NOT_FOUND"
    FEE_NOT_FOUND = "FEE_NOT_FOUND"
    USER_NOT_FOUND = "USER_NOT_FOUND"

    # Store errors
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"
    STORE_WRITE_FAILED = "STORE_WRITE_FAILED"

    # Configuration errors
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"


class BaseAppException(Exception):
    """
    Base exception class for all application exceptions.

    Provides consistent error handling across the package with
    structured error information.
    """

    retryable: bool = False

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format"""
        return {
            "error": {
                "message": self.message,
                "code": self.error_code.value,
                "details": self.details,
                "type": self.__class__.__name__,
                "retryable": self.retryable,
            }
        }

    def __str__(self) -> str:
        return f"{self.error_code.value}: {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message='{self.message}', error_code='{self.error_code.value}')"


# ========================================
# General Application Exceptions
# ========================================

class ValidationError(BaseAppException):
    """Exception raised when data validation fails"""

    def __init__(
        self,
        message: str = "Validation failed",
        field_errors: Optional[Dict[str, List[str]]] = None,
        error_code: ErrorCode = ErrorCode.VALIDATION_ERROR,
    ):
        details = {"field_errors": field_errors} if field_errors else {}
        super().__init__(message, error_code, details)


class ResourceNotFoundError(BaseAppException):
    """Exception raised when a requested resource is not found"""

    def __init__(
        self,
        resource_type: str = "Resource",
        resource_id: Optional[str] = None,
        message: Optional[str] = None
    ):
        if not message:
            message = f"{resource_type} not found"
            if resource_id:
                message += f" (ID: {resource_id})"

        details = {
            "resource_type": resource_type,
            "resource_id": resource_id
        }
        super().__init__(message, ErrorCode.RESOURCE_NOT_FOUND, details)


class StudentNotFoundError(ResourceNotFoundError):
    """Exception raised when a student is missing or has no family"""

    def __init__(
        self,
        student_id: Optional[str] = None,
        message: Optional[str] = None
    ):
        if not message:
            message = "Student not found or no family associated"
            if student_id:
                message += f" (ID: {student_id})"
        super().__init__("Student", student_id, message)
        self.error_code = ErrorCode.STUDENT_NOT_FOUND


class FeeNotFoundError(ResourceNotFoundError):
    """Exception raised when a fee definition is not found"""

    def __init__(
        self,
        fee_id: Optional[str] = None,
        message: Optional[str] = None
    ):
        super().__init__("Fee", fee_id, message)
        self.error_code = ErrorCode.FEE_NOT_FOUND


class UserNotFoundError(ResourceNotFoundError):
    """Exception raised when neither a user nor an instructor profile exists"""

    def __init__(
        self,
        user_id: Optional[str] = None,
        message: Optional[str] = None
    ):
        if not message:
            message = "No user data found"
            if user_id:
                message += f" (ID: {user_id})"
        super().__init__("User", user_id, message)
        self.error_code = ErrorCode.USER_NOT_FOUND


# ========================================
# Fee Domain Exceptions
# ========================================

class InvalidAssociationError(ValidationError):
    """Exception raised when a fee association type is not recognised or its id is blank"""

    def __init__(
        self,
        association_type: Any = None,
        message: Optional[str] = None
    ):
        if not message:
            message = f"Invalid association type: {association_type!r}"
        super().__init__(message, error_code=ErrorCode.INVALID_ASSOCIATION)
        self.details["association_type"] = str(association_type)


class InvalidFeeError(ValidationError):
    """Exception raised when a fee definition is malformed"""

    def __init__(
        self,
        message: str = "Invalid fee definition",
        fee_id: Optional[str] = None,
        field_errors: Optional[Dict[str, List[str]]] = None,
    ):
        super().__init__(message, field_errors, ErrorCode.INVALID_FEE)
        self.details["fee_id"] = fee_id


# ========================================
# Store Exceptions
# ========================================

class StoreError(BaseAppException):
    """Base exception for document store failures"""

    def __init__(
        self,
        message: str = "Document store operation failed",
        path: Optional[str] = None,
        operation: Optional[str] = None,
        error_code: ErrorCode = ErrorCode.STORE_WRITE_FAILED,
    ):
        details = {
            "path": path,
            "operation": operation,
        }
        super().__init__(message, error_code, details)


class StoreUnavailableError(StoreError):
    """Exception raised on transient I/O failure talking to the document store"""

    retryable = True

    def __init__(
        self,
        message: str = "Document store unavailable",
        path: Optional[str] = None,
        operation: Optional[str] = None,
    ):
        super().__init__(
            message,
            path=path,
            operation=operation,
            error_code=ErrorCode.STORE_UNAVAILABLE,
        )


# ========================================
# Configuration Exceptions
# ========================================

class ConfigurationError(BaseAppException):
    """Exception raised when configuration is invalid"""

    def __init__(
        self,
        message: str = "Configuration error",
        config_key: Optional[str] = None,
        field_errors: Optional[Dict[str, List[str]]] = None,
    ):
        details: Dict[str, Any] = {"config_key": config_key}
        if field_errors:
            details["field_errors"] = field_errors
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR, details)


# ========================================
# Utility Functions
# ========================================

def field_errors_from_pydantic(exc: Any) -> Dict[str, List[str]]:
    """Collapse a pydantic ValidationError into a field -> messages mapping"""
    field_errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ())) or "__root__"
        field_errors.setdefault(field, []).append(error.get("msg", "invalid value"))
    return field_errors


# Export all exception classes
__all__ = [
    # Enums
    'ErrorCode',

    # Base exceptions
    'BaseAppException',
    'ValidationError',

    # Resource Not Found exceptions
    'ResourceNotFoundError',
    'StudentNotFoundError',
    'FeeNotFoundError',
    'UserNotFoundError',

    # Fee domain exceptions
    'InvalidAssociationError',
    'InvalidFeeError',

    # Store exceptions
    'StoreError',
    'StoreUnavailableError',

    # Configuration exceptions
    'ConfigurationError',

    # Utility functions
    'field_errors_from_pydantic',
]
