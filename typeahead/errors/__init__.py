"""Exceptions raised by the suggestion engine."""
from __future__ import annotations

from .taxonomy import ErrorType


class TypeaheadError(Exception):
    """Base class for suggestion engine errors."""


class StorageError(TypeaheadError):
    """Raised when the key-value store cannot be read or written."""


class ConfigError(TypeaheadError):
    """Raised when settings or datasets cannot be loaded."""


__all__ = ["ConfigError", "ErrorType", "StorageError", "TypeaheadError"]
