"""
Tests for configuration loading, validation and defaults.

Tests cover:
- VaultConfig.from_settings() - all sections
- Defaults class values
- ConfigValidationError on invalid values
- String log level coercion ("DEBUG" -> 4)
- CORS origins as list or comma string
- Missing sections use defaults
- load_settings(): file, missing file, env overrides
"""

import pytest

from tts_vault.core.config import (
    ConfigValidationError,
    Defaults,
    Settings,
    VaultConfig,
    load_settings,
)

ENV_VARS = (
    "GOOGLE_PROJECT_ID",
    "FIREBASE_STORAGE_BUCKET",
    "TTS_VAULT_BACKEND",
    "TTS_VAULT_PUBLIC_BASE_URL",
    "TTS_VAULT_SETTINGS",
    "TTS_VAULT_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the caller's environment out of these tests."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestDefaults:
    """Tests for Defaults class values."""

    def test_backend_default(self):
        assert Defaults.BACKEND == "google"

    def test_storage_defaults(self):
        assert Defaults.STORAGE_MAKE_PUBLIC is True
        assert Defaults.STORAGE_CONTENT_TYPE == "audio/mpeg"

    def test_catalog_defaults(self):
        assert Defaults.CATALOG_COLLECTION == "audio"

    def test_pipeline_defaults(self):
        assert Defaults.PIPELINE_MAX_TEXT_CHARS == 5000
        assert Defaults.PIPELINE_REUSE_EXISTING is False
        assert Defaults.PIPELINE_CLEANUP_ORPHANS is True
        assert Defaults.PIPELINE_PER_KEY_LOCK is False

    def test_api_defaults(self):
        assert Defaults.API_PUBLIC_BASE_URL == "http://localhost:8080"
        assert Defaults.API_CORS_ORIGINS == (
            "https://chat.openai.com",
            "http://localhost:3000",
            "http://localhost:8080",
        )


class TestVaultConfigFromSettings:
    """Tests for VaultConfig.from_settings()."""

    def test_empty_settings_use_defaults(self):
        config = VaultConfig.from_settings(Settings(raw={}))
        assert config.backend == "google"
        assert config.storage.bucket == ""
        assert config.catalog.collection == "audio"
        assert config.pipeline.max_text_chars == 5000
        assert config.api.cors_origins == list(Defaults.API_CORS_ORIGINS)
        assert config.logging.level == 2
        assert config.google.timeout_s is None

    def test_full_settings(self):
        config = VaultConfig.from_settings(Settings(raw={
            "backend": "Memory",
            "google": {"project_id": "proj", "timeout_s": 15, "audio_encoding": "ogg_opus"},
            "storage": {"bucket": "proj.appspot.com", "make_public": False},
            "catalog": {"collection": "clips"},
            "pipeline": {"reuse_existing": True, "per_key_lock": True, "max_text_chars": 100},
            "api": {"public_base_url": "https://tts.example.com"},
            "logging": {"level": 3, "text_preview_chars": 0},
        }))
        assert config.backend == "memory"
        assert config.google.project_id == "proj"
        assert config.google.timeout_s == 15.0
        assert config.google.audio_encoding == "OGG_OPUS"
        assert config.storage.bucket == "proj.appspot.com"
        assert config.storage.make_public is False
        assert config.catalog.collection == "clips"
        assert config.pipeline.reuse_existing is True
        assert config.pipeline.per_key_lock is True
        assert config.pipeline.max_text_chars == 100
        assert config.api.public_base_url == "https://tts.example.com"
        assert config.logging.level == 3
        assert config.logging.text_preview_chars == 0

    def test_google_backend_without_bucket_parses(self):
        """A missing bucket is reported when Google backends are created, not here."""
        assert VaultConfig.from_settings(Settings(raw={"backend": "google"})).storage.bucket == ""

    def test_unknown_backend_rejected(self):
        with pytest.raises(ConfigValidationError):
            VaultConfig.from_settings(Settings(raw={"backend": "azure"}))

    def test_non_positive_timeout_rejected(self):
        with pytest.raises(ConfigValidationError):
            VaultConfig.from_settings(Settings(raw={"google": {"timeout_s": 0}}))

    def test_non_positive_max_text_rejected(self):
        with pytest.raises(ConfigValidationError):
            VaultConfig.from_settings(Settings(raw={"pipeline": {"max_text_chars": -1}}))

    def test_negative_preview_rejected(self):
        with pytest.raises(ConfigValidationError):
            VaultConfig.from_settings(Settings(raw={"logging": {"text_preview_chars": -5}}))

    def test_log_level_out_of_range_rejected(self):
        with pytest.raises(ConfigValidationError):
            VaultConfig.from_settings(Settings(raw={"logging": {"level": 7}}))

    @pytest.mark.parametrize("name, expected", [("DEBUG", 4), ("verbose", 3), ("info", 2), ("MINIMAL", 1)])
    def test_string_log_level(self, name, expected):
        config = VaultConfig.from_settings(Settings(raw={"logging": {"level": name}}))
        assert config.logging.level == expected

    def test_cors_origins_comma_string(self):
        config = VaultConfig.from_settings(Settings(raw={
            "api": {"cors_origins": "https://a.example, https://b.example"},
        }))
        assert config.api.cors_origins == ["https://a.example", "https://b.example"]

    def test_null_sections_use_defaults(self):
        config = VaultConfig.from_settings(Settings(raw={"storage": None, "pipeline": None}))
        assert config.storage.make_public is True
        assert config.pipeline.cleanup_orphans is True

    def test_get_config_shortcut(self):
        assert Settings(raw={"backend": "memory"}).get_config().backend == "memory"


class TestSettingsProperties:
    """Tests for Settings convenience properties."""

    def test_properties(self):
        settings = Settings(raw={
            "backend": " GOOGLE ",
            "google": {"project_id": "proj"},
            "storage": {"bucket": "b"},
        })
        assert settings.backend == "google"
        assert settings.project_id == "proj"
        assert settings.bucket == "b"


class TestLoadSettings:
    """Tests for load_settings()."""

    def test_loads_yaml(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("backend: memory\nstorage:\n  bucket: clips\n", encoding="utf-8")

        settings = load_settings(str(path))

        assert settings.backend == "memory"
        assert settings.bucket == "clips"

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_settings(str(tmp_path / "nope.yaml"))

    def test_missing_file_ok(self, tmp_path):
        settings = load_settings(str(tmp_path / "nope.yaml"), missing_ok=True)
        assert settings.raw == {}

    def test_empty_file(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("", encoding="utf-8")
        assert load_settings(str(path)).raw == {}

    def test_path_from_env(self, tmp_path, monkeypatch):
        path = tmp_path / "custom.yaml"
        path.write_text("backend: memory\n", encoding="utf-8")
        monkeypatch.setenv("TTS_VAULT_SETTINGS", str(path))
        assert load_settings().backend == "memory"

    def test_env_overrides(self, tmp_path, monkeypatch):
        path = tmp_path / "settings.yaml"
        path.write_text(
            "backend: google\ngoogle:\n  project_id: file-proj\nstorage:\n  bucket: file-bucket\n",
            encoding="utf-8",
        )
        monkeypatch.setenv("GOOGLE_PROJECT_ID", "env-proj")
        monkeypatch.setenv("FIREBASE_STORAGE_BUCKET", "env-bucket")
        monkeypatch.setenv("TTS_VAULT_BACKEND", "memory")
        monkeypatch.setenv("TTS_VAULT_PUBLIC_BASE_URL", "https://tts.example.com")

        config = load_settings(str(path)).get_config()

        assert config.google.project_id == "env-proj"
        assert config.storage.bucket == "env-bucket"
        assert config.backend == "memory"
        assert config.api.public_base_url == "https://tts.example.com"

    def test_log_level_env_override(self, tmp_path, monkeypatch):
        path = tmp_path / "settings.yaml"
        path.write_text("logging:\n  level: 2\n", encoding="utf-8")
        monkeypatch.setenv("TTS_VAULT_LOG_LEVEL", "debug")

        assert load_settings(str(path)).get_config().logging.level == 4

    def test_log_level_env_with_null_section(self, tmp_path, monkeypatch):
        path = tmp_path / "settings.yaml"
        path.write_text("logging:\n", encoding="utf-8")
        monkeypatch.setenv("TTS_VAULT_LOG_LEVEL", "3")

        assert load_settings(str(path)).get_config().logging.level == 3

    def test_repo_settings_file_is_valid(self):
        """The shipped config/settings.yaml parses and validates."""
        from pathlib import Path

        repo_settings = Path(__file__).resolve().parent.parent / "config" / "settings.yaml"
        config = load_settings(str(repo_settings)).get_config()
        assert config.backend == "memory"
        assert config.catalog.collection == "audio"
