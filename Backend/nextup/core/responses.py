"""
Standardized API Error Responses

Every JSON endpoint reports failures with the same envelope:

    {
        "error": {
            "code": "ERROR_CODE",
            "message": "Human-readable message",
            "details": {...}  # Optional extra context
        },
        "status": "error"
    }

Successful responses are plain JSON bodies (the tablet client reads arrays
and objects directly), so only the error side is wrapped.

ERROR CODES:
    - VALIDATION_ERROR: Request data failed validation
    - NOT_FOUND / SHOP_NOT_FOUND: Resource not found
    - AUTHORIZATION_DENIED: Shop id / admin secret did not match
    - CONFLICT: Shop id already taken
    - INTERNAL_ERROR: Server-side error
"""

from typing import Any, Optional

from pydantic import BaseModel


class ErrorDetail(BaseModel):
    """Structured error information."""
    code: str
    message: str
    details: Optional[dict[str, Any]] = None


class ErrorCodes:
    """Standard error codes for API responses."""

    # 400
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # 401
    AUTHORIZATION_DENIED = "AUTHORIZATION_DENIED"

    # 404
    NOT_FOUND = "NOT_FOUND"
    SHOP_NOT_FOUND = "SHOP_NOT_FOUND"

    # 409
    CONFLICT = "CONFLICT"

    # 500
    INTERNAL_ERROR = "INTERNAL_ERROR"


def error_response(
    code: str,
    message: str,
    details: Optional[dict] = None,
) -> dict:
    """Create a standardized error response dict."""
    error = ErrorDetail(code=code, message=message, details=details or None)
    return {"error": error.model_dump(exclude_none=True), "status": "error"}
