"""
Core module - configuration, database, error taxonomy, and response formatting.
"""
from .config import Settings, get_settings
from .db import Base, get_engine, get_sessionmaker, init_db
from .errors import (
    Conflict,
    NextUpError,
    NotFound,
    StorageFailure,
    Unauthorized,
    ValidationError,
    register_exception_handlers,
)
from .responses import ErrorCodes, ErrorDetail, error_response

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Database
    "Base",
    "get_engine",
    "get_sessionmaker",
    "init_db",
    # Errors
    "NextUpError",
    "ValidationError",
    "NotFound",
    "Unauthorized",
    "Conflict",
    "StorageFailure",
    "register_exception_handlers",
    # Responses
    "ErrorCodes",
    "ErrorDetail",
    "error_response",
]
