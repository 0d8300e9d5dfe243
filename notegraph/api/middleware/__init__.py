"""FastAPI error handling."""

from .error_handlers import (
    http_exception_handler,
    internal_exception_handler,
    note_service_exception_handler,
    register_error_handlers,
    validation_exception_handler,
)

__all__ = [
    "register_error_handlers",
    "note_service_exception_handler",
    "validation_exception_handler",
    "http_exception_handler",
    "internal_exception_handler",
]
