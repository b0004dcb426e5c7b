"""
Input Validation for the synthesis pipeline.

Validation runs before any remote call so a bad request never reaches the
speech service, the bucket or the catalog.

Validation Rules:
    - Source text: required, not blank, at most max_length characters
    - Target text: optional, at most max_length characters when given
    - Voice: required, at most 100 characters (segment structure is
      checked separately by addressing.split_voice)
    - Language code: required for per-language voice listings, at most
      35 characters (BCP-47 upper bound)

Texts are returned unchanged. The content key is computed over the exact
text the caller sent, so stripping here would change which artifact a
request maps to.

Error codes follow the pattern {FIELD}_REQUIRED / {FIELD}_TOO_LONG.
"""
from __future__ import annotations

from typing import Optional


class ValidationError(Exception):
    """
    Exception raised when input validation fails.

    Attributes:
        message: Human-readable error description.
        code: Machine-readable error code.

    Example:
        >>> raise ValidationError("Text is required", "TEXT_REQUIRED")
    """

    def __init__(self, message: str, code: str = "VALIDATION_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


def validate_text(text: Optional[str], max_length: int = 5000, field_name: str = "textNative") -> str:
    """
    Validate the source text.

    Raises:
        ValidationError: If missing, blank or too long.
    """
    if not text or not text.strip():
        raise ValidationError(f"{field_name} is required", "TEXT_REQUIRED")

    if len(text) > max_length:
        raise ValidationError(
            f"{field_name} exceeds maximum length ({len(text)} > {max_length})",
            "TEXT_TOO_LONG",
        )

    return text


def validate_optional_text(
    text: Optional[str],
    max_length: int = 5000,
    field_name: str = "textTranslated",
) -> Optional[str]:
    """
    Validate an optional text field.

    Blank values count as absent and come back as None.
    """
    if text is None or not text.strip():
        return None

    if len(text) > max_length:
        raise ValidationError(
            f"{field_name} exceeds maximum length ({len(text)} > {max_length})",
            "TEXT_TOO_LONG",
        )

    return text


def validate_voice(voice: Optional[str], max_length: int = 100) -> str:
    """Validate the voice name field."""
    if not voice or not voice.strip():
        raise ValidationError("voiceName is required", "VOICE_REQUIRED")

    if len(voice) > max_length:
        raise ValidationError(
            f"voiceName exceeds maximum length ({len(voice)} > {max_length})",
            "VOICE_TOO_LONG",
        )

    return voice


def validate_language_code(language_code: Optional[str], max_length: int = 35) -> str:
    """Validate a language code used to filter voices."""
    if not language_code or not language_code.strip():
        raise ValidationError("languageCode is required", "LANGUAGE_REQUIRED")

    language_code = language_code.strip()

    if len(language_code) > max_length:
        raise ValidationError(
            f"languageCode exceeds maximum length ({len(language_code)} > {max_length})",
            "LANGUAGE_TOO_LONG",
        )

    return language_code
