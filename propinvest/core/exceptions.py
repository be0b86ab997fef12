from typing import Any, Dict, Optional
from fastapi import HTTPException, status

class PropInvestException(Exception):
    """Base exception for the property investment normalizer."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

class IngestionException(PropInvestException):
    """Batch-level failure: the input cannot be read as a table at all."""
    pass

class ConfigurationException(PropInvestException):
    """Exception for configuration-related errors."""
    pass

# HTTP Exception handlers
def create_http_exception(
    status_code: int,
    message: str,
    error_code: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None
) -> HTTPException:
    """Create an HTTP exception with structured error response."""

    error_detail = {
        "message": message,
        "error_code": error_code,
        "details": details or {}
    }

    return HTTPException(
        status_code=status_code,
        detail=error_detail
    )

# Common HTTP exceptions
def not_found_exception(message: str = "Resource not found") -> HTTPException:
    return create_http_exception(
        status_code=status.HTTP_404_NOT_FOUND,
        message=message,
        error_code="RESOURCE_NOT_FOUND"
    )

def bad_request_exception(
    message: str = "Bad request",
    details: Optional[Dict[str, Any]] = None
) -> HTTPException:
    return create_http_exception(
        status_code=status.HTTP_400_BAD_REQUEST,
        message=message,
        error_code="BAD_REQUEST",
        details=details
    )

def payload_too_large_exception(message: str = "Payload too large") -> HTTPException:
    return create_http_exception(
        status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        message=message,
        error_code="PAYLOAD_TOO_LARGE"
    )
