"""Tests for pyproject.toml and package installation."""
from __future__ import annotations

import subprocess
import sys
from pathlib import Path

import pytest

PYPROJECT = Path(__file__).parent.parent / "pyproject.toml"


class TestPackageInstallation:
    """Test that the package is properly installed."""

    def test_package_importable(self):
        """Package can be imported without PYTHONPATH."""
        import tts_vault
        assert tts_vault is not None

    def test_version_defined(self):
        """Package has __version__ attribute."""
        import tts_vault
        assert isinstance(tts_vault.__version__, str)
        assert len(tts_vault.__version__) > 0

    def test_core_modules_importable(self):
        """Core modules can be imported."""
        from tts_vault.api import routes, schemas
        from tts_vault.core import config, logging, metrics
        from tts_vault.services import pipeline
        from tts_vault.tts import addressing, contracts

        for module in (routes, schemas, config, logging, metrics, pipeline, addressing, contracts):
            assert module is not None


class TestCLIEntryPoint:
    """Test the CLI entry point."""

    def test_cli_help_exits_zero(self):
        """CLI --help exits with code 0."""
        result = subprocess.run(
            [sys.executable, "-m", "tts_vault.cli", "--help"],
            capture_output=True,
            text=True,
        )
        assert result.returncode == 0
        assert "tts-vault CLI" in result.stdout


class TestPyprojectToml:
    """Test pyproject.toml configuration."""

    def test_pyproject_exists(self):
        assert PYPROJECT.exists()

    def test_pyproject_valid_toml(self):
        tomllib = pytest.importorskip("tomllib")
        data = tomllib.loads(PYPROJECT.read_text(encoding="utf-8"))

        assert data["project"]["name"] == "tts-vault"
        assert data["project"]["scripts"]["tts-vault"] == "tts_vault.cli:main"

    def test_pyproject_has_dependencies(self):
        tomllib = pytest.importorskip("tomllib")
        data = tomllib.loads(PYPROJECT.read_text(encoding="utf-8"))

        dep_names = [d.split(">=")[0].split("[")[0] for d in data["project"]["dependencies"]]
        for name in ("fastapi", "uvicorn", "pydantic", "pyyaml", "prometheus-client",
                     "google-cloud-texttospeech", "google-cloud-storage", "google-cloud-firestore"):
            assert name in dep_names
