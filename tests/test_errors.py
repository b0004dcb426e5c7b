"""
Tests for error codes and exception classes.

Tests cover:
- ErrorCode values
- VaultError creation, to_dict() and is_client_error
- Subclass codes and inheritance
"""
import pytest

from tts_vault.errors import (
    CLIENT_ERROR_CODES,
    CatalogReadFailedError,
    CatalogWriteFailedError,
    ErrorCode,
    InvalidInputError,
    InvalidVoiceSelectorError,
    NotFoundError,
    StorageWriteFailedError,
    SynthesisFailedError,
    VaultError,
)


class TestErrorCode:
    """Tests for ErrorCode constants."""

    def test_codes_match_names(self):
        for name in (
            "INVALID_VOICE",
            "INVALID_INPUT",
            "NOT_FOUND",
            "SYNTHESIS_FAILED",
            "STORAGE_WRITE_FAILED",
            "CATALOG_WRITE_FAILED",
            "CATALOG_READ_FAILED",
            "INTERNAL_ERROR",
        ):
            assert getattr(ErrorCode, name) == name

    def test_client_error_codes(self):
        assert CLIENT_ERROR_CODES == {
            ErrorCode.INVALID_VOICE,
            ErrorCode.INVALID_INPUT,
            ErrorCode.NOT_FOUND,
        }


class TestVaultError:
    """Tests for VaultError base exception."""

    def test_defaults(self):
        error = VaultError("boom")
        assert error.message == "boom"
        assert error.code == ErrorCode.INTERNAL_ERROR
        assert error.details == {}
        assert str(error) == "boom"

    def test_to_dict_without_details(self):
        assert VaultError("boom").to_dict() == {
            "ok": False,
            "error": ErrorCode.INTERNAL_ERROR,
            "message": "boom",
        }

    def test_to_dict_with_details(self):
        error = VaultError("boom", ErrorCode.SYNTHESIS_FAILED, {"key": "abc"})
        assert error.to_dict()["details"] == {"key": "abc"}

    def test_server_errors_are_not_client_errors(self):
        assert not SynthesisFailedError("x").is_client_error
        assert not CatalogReadFailedError("x").is_client_error


class TestSubclasses:
    """Each subclass carries its own code."""

    @pytest.mark.parametrize("cls, code, client", [
        (InvalidVoiceSelectorError, ErrorCode.INVALID_VOICE, True),
        (InvalidInputError, ErrorCode.INVALID_INPUT, True),
        (NotFoundError, ErrorCode.NOT_FOUND, True),
        (SynthesisFailedError, ErrorCode.SYNTHESIS_FAILED, False),
        (StorageWriteFailedError, ErrorCode.STORAGE_WRITE_FAILED, False),
        (CatalogWriteFailedError, ErrorCode.CATALOG_WRITE_FAILED, False),
        (CatalogReadFailedError, ErrorCode.CATALOG_READ_FAILED, False),
    ])
    def test_code_and_inheritance(self, cls, code, client):
        error = cls("message", {"a": 1})
        assert isinstance(error, VaultError)
        assert error.code == code
        assert error.details == {"a": 1}
        assert error.is_client_error is client

    def test_catchable_as_vault_error(self):
        with pytest.raises(VaultError):
            raise CatalogWriteFailedError("catalog down", {"artifact_deleted": True})
