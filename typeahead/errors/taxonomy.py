"""Error taxonomy enums used by telemetry logging."""
from __future__ import annotations

from enum import Enum


class ErrorType(str, Enum):
    """Standard error taxonomy for suggestion engine telemetry."""

    STORAGE_READ = "storage_read"
    STORAGE_WRITE = "storage_write"
    CACHE_CORRUPT = "cache_corrupt"
    INVALID_SUGGESTION = "invalid_suggestion"
    UNKNOWN = "unknown"

    @classmethod
    def has_value(cls, value: str) -> bool:
        """Return True if *value* matches one of the enum members."""

        try:
            cls(value)
        except ValueError:
            return False
        return True
