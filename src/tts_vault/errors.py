"""
Error codes and exceptions.

Every failure the pipeline reports is a VaultError subclass carrying a
machine-readable code. The HTTP layer maps codes to status codes; the CLI
prints to_dict().

    INVALID_VOICE         400  voice selector has fewer than three segments
    INVALID_INPUT         400  text missing or too long
    NOT_FOUND             404  no catalog record for the key
    SYNTHESIS_FAILED      502  speech service error, nothing written
    STORAGE_WRITE_FAILED  500  upload or ACL change failed, no record written
    CATALOG_WRITE_FAILED  500  artifact stored but record not written
    CATALOG_READ_FAILED   503  catalog unavailable during lookup
    INTERNAL_ERROR        500  anything else
    CONFIG_ERROR          503  settings invalid, pipeline could not be built
"""
from __future__ import annotations

from typing import Any, Dict, Optional


class ErrorCode:
    """Error codes returned in API error bodies."""
    INVALID_VOICE = "INVALID_VOICE"
    INVALID_INPUT = "INVALID_INPUT"
    NOT_FOUND = "NOT_FOUND"
    SYNTHESIS_FAILED = "SYNTHESIS_FAILED"
    STORAGE_WRITE_FAILED = "STORAGE_WRITE_FAILED"
    CATALOG_WRITE_FAILED = "CATALOG_WRITE_FAILED"
    CATALOG_READ_FAILED = "CATALOG_READ_FAILED"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    CONFIG_ERROR = "CONFIG_ERROR"


CLIENT_ERROR_CODES = frozenset({
    ErrorCode.INVALID_VOICE,
    ErrorCode.INVALID_INPUT,
    ErrorCode.NOT_FOUND,
})


class VaultError(Exception):
    """
    Base exception for pipeline failures.

    Attributes:
        message: Human-readable error message.
        code: One of the ErrorCode values.
        details: Extra context (key, error_type, artifact_deleted, ...).
    """

    def __init__(self, message: str, code: str = ErrorCode.INTERNAL_ERROR, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(message)

    @property
    def is_client_error(self) -> bool:
        """True when the caller sent something unusable (4xx)."""
        return self.code in CLIENT_ERROR_CODES

    def to_dict(self) -> Dict[str, Any]:
        """Standard error body for API responses."""
        result: Dict[str, Any] = {
            "ok": False,
            "error": self.code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


class InvalidVoiceSelectorError(VaultError):
    """Voice name does not decompose into language, region and variant."""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCode.INVALID_VOICE, details)


class InvalidInputError(VaultError):
    """Request text failed validation."""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCode.INVALID_INPUT, details)


class NotFoundError(VaultError):
    """No catalog record exists for the requested key."""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCode.NOT_FOUND, details)


class SynthesisFailedError(VaultError):
    """The speech service call failed. Nothing was stored."""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCode.SYNTHESIS_FAILED, details)


class StorageWriteFailedError(VaultError):
    """Upload or visibility change failed. No catalog record was written."""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCode.STORAGE_WRITE_FAILED, details)


class CatalogWriteFailedError(VaultError):
    """
    The artifact was stored but its record was not.

    details["artifact_deleted"] says whether the stored object was removed
    again. When it was kept, details["artifact_kept_reason"] says why:
    existing_record means an earlier record still points at the object;
    any other reason leaves the object orphaned.
    """
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCode.CATALOG_WRITE_FAILED, details)


class CatalogReadFailedError(VaultError):
    """The catalog could not be read during a lookup."""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCode.CATALOG_READ_FAILED, details)
