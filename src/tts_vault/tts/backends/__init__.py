"""
Collaborator backends.

Two families are available, selected by the top-level `backend` setting
(or TTS_VAULT_BACKEND):

    google   Cloud Text-to-Speech + Cloud Storage + Firestore (default)
    memory   In-process fakes, no credentials needed

Google classes are imported lazily so that the memory backend and the
test suite do not need the Google client libraries to be importable at
package import time.

Usage:
    from tts_vault.tts.backends import get_backends
    backends = get_backends(settings.get_config())
    backends.synthesizer.synthesize("en-US", "en-US-Wavenet-A", "Hello")
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from tts_vault.core.config import ConfigValidationError, VaultConfig
from tts_vault.core.logging import get_logger, info
from tts_vault.tts.contracts import ArtifactStore, MetadataCatalog, SpeechSynthesizer

__all__ = [
    "Backends",
    "get_backends",
    "FirestoreCatalog",
    "GCSArtifactStore",
    "GoogleSpeechSynthesizer",
    "MemoryArtifactStore",
    "MemoryCatalog",
    "MemorySpeechSynthesizer",
]


@dataclass
class Backends:
    """The three collaborators one pipeline instance talks to."""
    name: str
    synthesizer: SpeechSynthesizer
    store: ArtifactStore
    catalog: MetadataCatalog


def _create_google(config: VaultConfig) -> Backends:
    if not config.storage.bucket:
        raise ConfigValidationError(
            "storage.bucket is required for the google backend "
            "(set it in settings.yaml or FIREBASE_STORAGE_BUCKET)"
        )

    from tts_vault.tts.backends.firestore_catalog import FirestoreCatalog
    from tts_vault.tts.backends.gcs import GCSArtifactStore
    from tts_vault.tts.backends.google_tts import GoogleSpeechSynthesizer

    timeout = config.google.timeout_s
    project = config.google.project_id or None
    return Backends(
        name="google",
        synthesizer=GoogleSpeechSynthesizer(timeout_s=timeout),
        store=GCSArtifactStore(
            config.storage.bucket,
            project=project,
            content_type=config.storage.content_type,
            timeout_s=timeout,
        ),
        catalog=FirestoreCatalog(
            collection=config.catalog.collection,
            project=project,
            timeout_s=timeout,
        ),
    )


def _create_memory(config: VaultConfig) -> Backends:
    from tts_vault.tts.backends.memory import MemoryArtifactStore, MemoryCatalog, MemorySpeechSynthesizer

    return Backends(
        name="memory",
        synthesizer=MemorySpeechSynthesizer(),
        store=MemoryArtifactStore(bucket_name=config.storage.bucket or "memory-bucket"),
        catalog=MemoryCatalog(),
    )


def get_backends(config: VaultConfig) -> Backends:
    """
    Create the collaborators named by config.backend.

    Raises:
        ConfigValidationError: google backend without storage.bucket.
        ValueError: If the backend name is unknown.
    """
    if config.backend == "google":
        backends = _create_google(config)
    elif config.backend == "memory":
        backends = _create_memory(config)
    else:
        raise ValueError(f"Unknown backend: {config.backend}")

    info(get_logger("tts-vault.backends"), "backends_created", backend=backends.name)
    return backends


def __getattr__(name: str):
    """Lazy import backend classes on first access."""
    if name == "GoogleSpeechSynthesizer":
        from tts_vault.tts.backends.google_tts import GoogleSpeechSynthesizer
        return GoogleSpeechSynthesizer
    if name == "GCSArtifactStore":
        from tts_vault.tts.backends.gcs import GCSArtifactStore
        return GCSArtifactStore
    if name == "FirestoreCatalog":
        from tts_vault.tts.backends.firestore_catalog import FirestoreCatalog
        return FirestoreCatalog
    if name in ("MemorySpeechSynthesizer", "MemoryArtifactStore", "MemoryCatalog"):
        from tts_vault.tts.backends import memory
        return getattr(memory, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


if TYPE_CHECKING:
    from tts_vault.tts.backends.firestore_catalog import FirestoreCatalog
    from tts_vault.tts.backends.gcs import GCSArtifactStore
    from tts_vault.tts.backends.google_tts import GoogleSpeechSynthesizer
    from tts_vault.tts.backends.memory import MemoryArtifactStore, MemoryCatalog, MemorySpeechSynthesizer
