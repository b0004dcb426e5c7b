"""
Request correlation and logging state.

The request id lives in a ContextVar so that it follows a request through
FastAPI's threadpool and any asyncio tasks without being passed around.
The active level and the resolved logging config are process-wide.

Environment variables read by read_logging_config():
    TTS_VAULT_LOG_LEVEL          level (1-4 or a name)
    TTS_VAULT_LOG_DIR            directory for the JSONL file (enables it)
    TTS_VAULT_JSONL_FILE         JSONL filename (default tts-vault.jsonl)
    TTS_VAULT_LOG_ROTATE_BYTES   max JSONL size before rotation
    TTS_VAULT_LOG_ROTATE_BACKUP  rotated files kept
"""
from __future__ import annotations

import os
from contextvars import ContextVar
from typing import Any, Dict, Optional

import yaml

from .levels import LogLevel

# "-" marks log lines emitted outside a request
_request_id: ContextVar[str] = ContextVar("request_id", default="-")

_configured: bool = False
_current_level: LogLevel = LogLevel.NORMAL


def get_request_id() -> str:
    """Request id bound to the current context, or "-"."""
    return _request_id.get()


def set_request_id(rid: str) -> None:
    """Bind a request id to the current context for log correlation."""
    _request_id.set(rid)


def get_level() -> LogLevel:
    return _current_level


def set_level(level: LogLevel) -> None:
    global _current_level
    _current_level = level


def is_configured() -> bool:
    return _configured


def set_configured(value: bool) -> None:
    global _configured
    _configured = value


def _read_settings_section(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Read the logging section straight from the YAML settings file.

    Parsed here rather than through core.config so that configuring
    logging never depends on the rest of the settings being valid.
    """
    path = path or os.getenv("TTS_VAULT_SETTINGS", "config/settings.yaml")
    if not os.path.exists(path):
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError):
        return {}
    section = raw.get("logging", {}) if isinstance(raw, dict) else {}
    return dict(section or {})


def read_logging_config(settings_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Resolve logging configuration: environment first, then settings.yaml.

    Args:
        settings_path: Settings file to read instead of $TTS_VAULT_SETTINGS.

    Returns:
        Dictionary with any of level, log_dir, jsonl_file,
        rotate_max_bytes, rotate_backup_count.
    """
    cfg = _read_settings_section(settings_path)

    if os.getenv("TTS_VAULT_LOG_LEVEL"):
        cfg["level"] = os.environ["TTS_VAULT_LOG_LEVEL"]
    if os.getenv("TTS_VAULT_LOG_DIR"):
        cfg["log_dir"] = os.environ["TTS_VAULT_LOG_DIR"]
    if os.getenv("TTS_VAULT_JSONL_FILE"):
        cfg["jsonl_file"] = os.environ["TTS_VAULT_JSONL_FILE"]
    if os.getenv("TTS_VAULT_LOG_ROTATE_BYTES"):
        try:
            cfg["rotate_max_bytes"] = int(os.environ["TTS_VAULT_LOG_ROTATE_BYTES"])
        except ValueError:
            pass
    if os.getenv("TTS_VAULT_LOG_ROTATE_BACKUP"):
        try:
            cfg["rotate_backup_count"] = int(os.environ["TTS_VAULT_LOG_ROTATE_BACKUP"])
        except ValueError:
            pass

    return cfg
