"""
Configuration Management for tts-vault.

Settings come from three places, highest priority first:
    1. Environment variables (GOOGLE_PROJECT_ID, FIREBASE_STORAGE_BUCKET,
       TTS_VAULT_BACKEND, TTS_VAULT_PUBLIC_BASE_URL, TTS_VAULT_LOG_LEVEL)
    2. YAML config file (config/settings.yaml, or $TTS_VAULT_SETTINGS)
    3. Defaults class values

Example settings.yaml:
    backend: google

    google:
      project_id: my-project
      timeout_s: 30

    storage:
      bucket: my-project.appspot.com
      make_public: true

    catalog:
      collection: audio

    pipeline:
      reuse_existing: false
      cleanup_orphans: true

    api:
      public_base_url: http://localhost:8080

    logging:
      level: 2
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional
import os
import yaml


DEFAULT_SETTINGS_PATH = "config/settings.yaml"


class ConfigValidationError(Exception):
    """Raised when a configuration value is missing, out of bounds or of the wrong type."""
    pass


class Defaults:
    """
    Centralized default configuration values.

    Every section dataclass below reads its defaults from here so that
    tests and docs have a single place to check.
    """

    # ─────────────────────────────────────────────────────────────────────────
    # Backends
    # ─────────────────────────────────────────────────────────────────────────
    BACKEND = "google"                  # google | memory

    # ─────────────────────────────────────────────────────────────────────────
    # Google Cloud
    # ─────────────────────────────────────────────────────────────────────────
    GOOGLE_PROJECT_ID = ""              # Empty = client library default project
    GOOGLE_TIMEOUT_S: Optional[float] = None   # None = transport default
    GOOGLE_AUDIO_ENCODING = "MP3"

    # ─────────────────────────────────────────────────────────────────────────
    # Artifact storage
    # ─────────────────────────────────────────────────────────────────────────
    STORAGE_BUCKET = ""
    STORAGE_MAKE_PUBLIC = True
    STORAGE_CONTENT_TYPE = "audio/mpeg"

    # ─────────────────────────────────────────────────────────────────────────
    # Metadata catalog
    # ─────────────────────────────────────────────────────────────────────────
    CATALOG_COLLECTION = "audio"

    # ─────────────────────────────────────────────────────────────────────────
    # Pipeline behaviour
    # ─────────────────────────────────────────────────────────────────────────
    PIPELINE_MAX_TEXT_CHARS = 5000      # Google TTS request limit is 5000 bytes
    PIPELINE_REUSE_EXISTING = False     # Check the catalog before synthesizing
    PIPELINE_CLEANUP_ORPHANS = True     # Delete the artifact if the catalog write fails
    PIPELINE_PER_KEY_LOCK = False       # Serialize identical concurrent requests

    # ─────────────────────────────────────────────────────────────────────────
    # HTTP API
    # ─────────────────────────────────────────────────────────────────────────
    API_PUBLIC_BASE_URL = "http://localhost:8080"
    API_CORS_ORIGINS = (
        "https://chat.openai.com",
        "http://localhost:3000",
        "http://localhost:8080",
    )

    # ─────────────────────────────────────────────────────────────────────────
    # Logging
    # ─────────────────────────────────────────────────────────────────────────
    LOGGING_TEXT_PREVIEW_CHARS = 80
    LOGGING_LEVEL = 2                   # 1=MINIMAL, 2=NORMAL, 3=VERBOSE, 4=DEBUG


@dataclass
class GoogleConfig:
    """Google Cloud client settings shared by the speech, storage and Firestore clients."""
    project_id: str = Defaults.GOOGLE_PROJECT_ID
    timeout_s: Optional[float] = Defaults.GOOGLE_TIMEOUT_S
    audio_encoding: str = Defaults.GOOGLE_AUDIO_ENCODING


@dataclass
class StorageConfig:
    """
    Artifact storage settings.

    Objects are named after their content key and, by default, made
    publicly readable right after upload so the returned URL plays directly.
    """
    bucket: str = Defaults.STORAGE_BUCKET
    make_public: bool = Defaults.STORAGE_MAKE_PUBLIC
    content_type: str = Defaults.STORAGE_CONTENT_TYPE


@dataclass
class CatalogConfig:
    """Metadata catalog settings (Firestore collection holding one document per key)."""
    collection: str = Defaults.CATALOG_COLLECTION


@dataclass
class PipelineConfig:
    """
    Synthesis pipeline switches.

    reuse_existing:
        Look the key up before calling the speech service and return the
        stored record on a hit. Saves a synthesis call at the price of
        serving whatever was stored first.
    cleanup_orphans:
        When the catalog write fails after the upload succeeded, delete the
        uploaded object so no unreachable artifact is left behind.
    per_key_lock:
        Serialize concurrent requests that share a content key inside this
        process. Without it both run and the last write wins.
    """
    max_text_chars: int = Defaults.PIPELINE_MAX_TEXT_CHARS
    reuse_existing: bool = Defaults.PIPELINE_REUSE_EXISTING
    cleanup_orphans: bool = Defaults.PIPELINE_CLEANUP_ORPHANS
    per_key_lock: bool = Defaults.PIPELINE_PER_KEY_LOCK


@dataclass
class ApiConfig:
    """HTTP surface settings: playback URL base and CORS origins."""
    public_base_url: str = Defaults.API_PUBLIC_BASE_URL
    cors_origins: List[str] = field(default_factory=lambda: list(Defaults.API_CORS_ORIGINS))


@dataclass
class LoggingConfig:
    """
    Logging configuration.

    Log levels:
        1 = MINIMAL: Startup, shutdown, failures only
        2 = NORMAL: Request lifecycle (default)
        3 = VERBOSE: Per-stage timing
        4 = DEBUG: Full request payloads
    """
    text_preview_chars: int = Defaults.LOGGING_TEXT_PREVIEW_CHARS
    level: int = Defaults.LOGGING_LEVEL


@dataclass
class VaultConfig:
    """
    Validated configuration for the whole service.

    Usage:
        settings = load_settings("config/settings.yaml")
        config = VaultConfig.from_settings(settings)
        print(config.storage.bucket)
    """
    backend: str = Defaults.BACKEND
    google: GoogleConfig = field(default_factory=GoogleConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    catalog: CatalogConfig = field(default_factory=CatalogConfig)
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    api: ApiConfig = field(default_factory=ApiConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_settings(cls, settings: "Settings") -> "VaultConfig":
        """
        Build a VaultConfig from raw Settings, applying defaults and checks.

        Raises:
            ConfigValidationError: If any value fails validation.
        """
        raw = settings.raw

        backend = settings.backend
        if backend not in ("google", "memory"):
            raise ConfigValidationError(f"backend must be 'google' or 'memory', got {backend!r}")

        # ─────────────────────────────────────────────────────────────────────
        # Google
        # ─────────────────────────────────────────────────────────────────────
        google_raw = raw.get("google", {}) or {}
        timeout_raw = google_raw.get("timeout_s", Defaults.GOOGLE_TIMEOUT_S)
        google = GoogleConfig(
            project_id=str(google_raw.get("project_id") or Defaults.GOOGLE_PROJECT_ID),
            timeout_s=float(timeout_raw) if timeout_raw is not None else None,
            audio_encoding=str(google_raw.get("audio_encoding", Defaults.GOOGLE_AUDIO_ENCODING)).upper(),
        )
        if google.timeout_s is not None:
            cls._validate_positive("google.timeout_s", google.timeout_s)

        # ─────────────────────────────────────────────────────────────────────
        # Storage
        # ─────────────────────────────────────────────────────────────────────
        storage_raw = raw.get("storage", {}) or {}
        storage = StorageConfig(
            bucket=str(storage_raw.get("bucket") or Defaults.STORAGE_BUCKET),
            make_public=bool(storage_raw.get("make_public", Defaults.STORAGE_MAKE_PUBLIC)),
            content_type=str(storage_raw.get("content_type", Defaults.STORAGE_CONTENT_TYPE)),
        )

        # ─────────────────────────────────────────────────────────────────────
        # Catalog
        # ─────────────────────────────────────────────────────────────────────
        catalog_raw = raw.get("catalog", {}) or {}
        catalog = CatalogConfig(
            collection=str(catalog_raw.get("collection") or Defaults.CATALOG_COLLECTION),
        )

        # ─────────────────────────────────────────────────────────────────────
        # Pipeline
        # ─────────────────────────────────────────────────────────────────────
        pipeline_raw = raw.get("pipeline", {}) or {}
        pipeline = PipelineConfig(
            max_text_chars=int(pipeline_raw.get("max_text_chars", Defaults.PIPELINE_MAX_TEXT_CHARS)),
            reuse_existing=bool(pipeline_raw.get("reuse_existing", Defaults.PIPELINE_REUSE_EXISTING)),
            cleanup_orphans=bool(pipeline_raw.get("cleanup_orphans", Defaults.PIPELINE_CLEANUP_ORPHANS)),
            per_key_lock=bool(pipeline_raw.get("per_key_lock", Defaults.PIPELINE_PER_KEY_LOCK)),
        )
        cls._validate_positive("pipeline.max_text_chars", pipeline.max_text_chars)

        # ─────────────────────────────────────────────────────────────────────
        # API
        # ─────────────────────────────────────────────────────────────────────
        api_raw = raw.get("api", {}) or {}
        origins = api_raw.get("cors_origins", list(Defaults.API_CORS_ORIGINS))
        if isinstance(origins, str):
            origins = [o.strip() for o in origins.split(",") if o.strip()]
        api = ApiConfig(
            public_base_url=str(api_raw.get("public_base_url") or Defaults.API_PUBLIC_BASE_URL),
            cors_origins=[str(o) for o in origins],
        )

        # ─────────────────────────────────────────────────────────────────────
        # Logging
        # ─────────────────────────────────────────────────────────────────────
        logging_raw = raw.get("logging", {}) or {}
        log_level_raw = logging_raw.get("level", Defaults.LOGGING_LEVEL)

        # Accept level names as well as numbers
        if isinstance(log_level_raw, str):
            level_map = {
                "MINIMAL": 1, "1": 1,
                "NORMAL": 2, "INFO": 2, "2": 2,
                "VERBOSE": 3, "3": 3,
                "DEBUG": 4, "4": 4,
            }
            log_level = level_map.get(log_level_raw.upper(), Defaults.LOGGING_LEVEL)
        else:
            log_level = int(log_level_raw)

        logging_cfg = LoggingConfig(
            text_preview_chars=int(logging_raw.get("text_preview_chars", Defaults.LOGGING_TEXT_PREVIEW_CHARS)),
            level=log_level,
        )
        cls._validate_non_negative("logging.text_preview_chars", logging_cfg.text_preview_chars)
        cls._validate_range("logging.level", logging_cfg.level, 1, 4)

        return cls(
            backend=backend,
            google=google,
            storage=storage,
            catalog=catalog,
            pipeline=pipeline,
            api=api,
            logging=logging_cfg,
        )

    @staticmethod
    def _validate_positive(name: str, value: int | float) -> None:
        """Validate that a value is positive (> 0)."""
        if value <= 0:
            raise ConfigValidationError(f"{name} must be positive, got {value}")

    @staticmethod
    def _validate_non_negative(name: str, value: int | float) -> None:
        """Validate that a value is non-negative (>= 0)."""
        if value < 0:
            raise ConfigValidationError(f"{name} must be non-negative, got {value}")

    @staticmethod
    def _validate_range(name: str, value: int | float, min_val: int | float, max_val: int | float) -> None:
        """Validate that a value is within [min_val, max_val]."""
        if not (min_val <= value <= max_val):
            raise ConfigValidationError(f"{name} must be between {min_val} and {max_val}, got {value}")


@dataclass(frozen=True)
class Settings:
    """
    Immutable settings container loaded from YAML.

    This is the raw mapping before validation; call get_config() for the
    typed VaultConfig.
    """
    raw: Dict[str, Any]

    @property
    def backend(self) -> str:
        """Collaborator backend name (google or memory)."""
        return str(self.raw.get("backend", Defaults.BACKEND)).strip().lower()

    @property
    def project_id(self) -> str:
        """Google Cloud project id."""
        return str((self.raw.get("google", {}) or {}).get("project_id") or Defaults.GOOGLE_PROJECT_ID)

    @property
    def bucket(self) -> str:
        """Storage bucket holding the audio objects."""
        return str((self.raw.get("storage", {}) or {}).get("bucket") or Defaults.STORAGE_BUCKET)

    def get_config(self) -> VaultConfig:
        """
        Get validated VaultConfig from these settings.

        Raises:
            ConfigValidationError: If validation fails.
        """
        return VaultConfig.from_settings(self)


def _apply_env_overrides(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Overlay the environment variables that take precedence over the YAML file."""
    project = os.getenv("GOOGLE_PROJECT_ID")
    if project:
        raw.setdefault("google", {})["project_id"] = project

    bucket = os.getenv("FIREBASE_STORAGE_BUCKET")
    if bucket:
        raw.setdefault("storage", {})["bucket"] = bucket

    backend = os.getenv("TTS_VAULT_BACKEND")
    if backend:
        raw["backend"] = backend

    base_url = os.getenv("TTS_VAULT_PUBLIC_BASE_URL")
    if base_url:
        raw.setdefault("api", {})["public_base_url"] = base_url

    log_level = os.getenv("TTS_VAULT_LOG_LEVEL")
    if log_level:
        raw["logging"] = dict(raw.get("logging") or {}, level=log_level)

    return raw


def load_settings(path: Optional[str] = None, missing_ok: bool = False) -> Settings:
    """
    Load settings from a YAML configuration file.

    Args:
        path: YAML file path. Defaults to $TTS_VAULT_SETTINGS or
            config/settings.yaml.
        missing_ok: Return env-only settings instead of raising when the
            file does not exist.

    Returns:
        Settings object with loaded configuration.

    Raises:
        FileNotFoundError: If the file doesn't exist and missing_ok is False.
    """
    p = Path(path or os.getenv("TTS_VAULT_SETTINGS", DEFAULT_SETTINGS_PATH))
    raw: Dict[str, Any] = {}

    if p.exists():
        with p.open("r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    elif not missing_ok:
        raise FileNotFoundError(f"settings file not found: {p.resolve()}")

    return Settings(raw=_apply_env_overrides(raw))
