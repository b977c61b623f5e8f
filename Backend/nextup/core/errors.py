"""
Domain error taxonomy and its HTTP translation.

Services raise these exceptions; routers never build error payloads by hand.
JSON routes rely on the handlers registered by ``register_exception_handlers``.
HTML routes catch the exceptions themselves and re-render the originating form.
"""

import logging
from typing import Iterable, Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from .responses import ErrorCodes, error_response

logger = logging.getLogger(__name__)


class NextUpError(Exception):
    """Base class for all domain errors."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = ErrorCodes.INTERNAL_ERROR

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def details(self) -> Optional[dict]:
        return None


class ValidationError(NextUpError):
    """Missing or invalid required input."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = ErrorCodes.VALIDATION_ERROR

    def __init__(self, message: str, fields: Iterable[str] = ()):
        self.fields = list(fields)
        super().__init__(message)

    @classmethod
    def missing(cls, fields: Iterable[str]) -> "ValidationError":
        fields = list(fields)
        return cls(f"Missing required fields: {', '.join(fields)}", fields)

    def details(self) -> Optional[dict]:
        return {"fields": self.fields} if self.fields else None


class NotFound(NextUpError):
    status_code = status.HTTP_404_NOT_FOUND
    code = ErrorCodes.NOT_FOUND

    def __init__(self, message: str, code: str = ErrorCodes.NOT_FOUND):
        self.code = code
        super().__init__(message)


class Unauthorized(NextUpError):
    """Credential mismatch. The message never says which field was wrong."""

    status_code = status.HTTP_401_UNAUTHORIZED
    code = ErrorCodes.AUTHORIZATION_DENIED

    def __init__(self, message: str = "Invalid shop credentials"):
        super().__init__(message)


class Conflict(NextUpError):
    status_code = status.HTTP_409_CONFLICT
    code = ErrorCodes.CONFLICT

    def __init__(self, message: str, shop_id: Optional[str] = None):
        self.shop_id = shop_id
        super().__init__(message)

    def details(self) -> Optional[dict]:
        return {"shopId": self.shop_id} if self.shop_id else None


class StorageFailure(NextUpError):
    """Persistence unavailable. Never carries driver detail to the client."""

    def __init__(self, operation: str, shop_id: Optional[str] = None):
        self.operation = operation
        self.shop_id = shop_id
        super().__init__(f"Storage failure during {operation}")


def shop_not_found(shop_id: str) -> NotFound:
    return NotFound(f"Shop not found: {shop_id}", code=ErrorCodes.SHOP_NOT_FOUND)


async def handle_nextup_error(request: Request, exc: NextUpError) -> JSONResponse:
    if isinstance(exc, StorageFailure):
        logger.error(
            "Storage failure on %s %s (operation=%s shop_id=%s)",
            request.method, request.url.path, exc.operation, exc.shop_id,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response(ErrorCodes.INTERNAL_ERROR, "Internal server error"),
        )
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(exc.code, exc.message, exc.details()),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(NextUpError, handle_nextup_error)
