"""
Tests for input validation functions.

Tests cover:
- validate_text(): required, blank, length limit, no stripping
- validate_optional_text(): None/blank handling, length limit
- validate_voice(): required, length limit
- validate_language_code(): required, trimming, length limit
- ValidationError attributes
"""
import pytest

from tts_vault.services.validators import (
    ValidationError,
    validate_language_code,
    validate_optional_text,
    validate_text,
    validate_voice,
)


class TestValidationError:
    """Tests for ValidationError exception."""

    def test_stores_message_and_code(self):
        error = ValidationError("Text is required", "TEXT_REQUIRED")
        assert error.message == "Text is required"
        assert error.code == "TEXT_REQUIRED"
        assert str(error) == "Text is required"

    def test_default_code(self):
        assert ValidationError("bad").code == "VALIDATION_ERROR"


class TestValidateText:
    """Tests for validate_text()."""

    def test_valid_text_returned_unchanged(self):
        """Text is returned exactly as given, including whitespace."""
        assert validate_text("  Hello  ") == "  Hello  "

    @pytest.mark.parametrize("text", [None, "", "   ", "\n\t"])
    def test_missing_or_blank_rejected(self, text):
        with pytest.raises(ValidationError) as exc_info:
            validate_text(text)
        assert exc_info.value.code == "TEXT_REQUIRED"

    def test_exactly_max_length_accepted(self):
        assert validate_text("a" * 10, max_length=10) == "a" * 10

    def test_over_max_length_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_text("a" * 11, max_length=10)
        assert exc_info.value.code == "TEXT_TOO_LONG"
        assert "11 > 10" in exc_info.value.message

    def test_field_name_in_message(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_text("", field_name="textNative")
        assert "textNative" in exc_info.value.message


class TestValidateOptionalText:
    """Tests for validate_optional_text()."""

    def test_none_returns_none(self):
        assert validate_optional_text(None) is None

    def test_blank_returns_none(self):
        assert validate_optional_text("   ") is None

    def test_valid_text_returned(self):
        assert validate_optional_text("Guten Morgen") == "Guten Morgen"

    def test_over_max_length_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_optional_text("a" * 6, max_length=5)
        assert exc_info.value.code == "TEXT_TOO_LONG"


class TestValidateVoice:
    """Tests for validate_voice()."""

    def test_valid_voice(self):
        assert validate_voice("en-US-Neural2-A") == "en-US-Neural2-A"

    @pytest.mark.parametrize("voice", [None, "", "  "])
    def test_missing_rejected(self, voice):
        with pytest.raises(ValidationError) as exc_info:
            validate_voice(voice)
        assert exc_info.value.code == "VOICE_REQUIRED"

    def test_too_long_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_voice("en-US-" + "A" * 200)
        assert exc_info.value.code == "VOICE_TOO_LONG"


class TestValidateLanguageCode:
    """Tests for validate_language_code()."""

    def test_trimmed(self):
        assert validate_language_code(" en-US ") == "en-US"

    def test_missing_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_language_code("")
        assert exc_info.value.code == "LANGUAGE_REQUIRED"

    def test_too_long_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_language_code("x" * 36)
        assert exc_info.value.code == "LANGUAGE_TOO_LONG"
