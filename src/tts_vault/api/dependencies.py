"""
FastAPI Dependency Injection Providers.

    1. get_settings() - Loads and caches application configuration
    2. get_synthesis_pipeline() - Creates/returns the singleton pipeline

Backend clients live inside the pipeline, so every request shares one
TextToSpeechClient, one storage client and one Firestore client.

Tests swap the pipeline with app.dependency_overrides or by passing one
to create_app().
"""
from __future__ import annotations

from functools import lru_cache

from tts_vault.core.config import Settings, load_settings
from tts_vault.services.pipeline import SynthesisPipeline, get_pipeline


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Load and cache application settings.

    Reads $TTS_VAULT_SETTINGS or config/settings.yaml. A missing file falls
    back to defaults plus environment overrides.
    """
    return load_settings(missing_ok=True)


def get_synthesis_pipeline() -> SynthesisPipeline:
    """Get the singleton SynthesisPipeline instance."""
    return get_pipeline(get_settings())
