"""
tts-vault Services Layer.

Business logic between the API/CLI and the backends.

Components:
    - pipeline.py: SynthesisPipeline (synthesize, lookup, voice listings)
    - validators.py: Input validation functions
    - locks.py: Per-key in-process locking
"""
from tts_vault.errors import (
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

from .pipeline import (
    SynthesisPipeline,
    SynthesisRequest,
    SynthesisResult,
    get_pipeline,
    reset_pipeline,
)

__all__ = [
    "SynthesisPipeline",
    "SynthesisRequest",
    "SynthesisResult",
    "get_pipeline",
    "reset_pipeline",
    "VaultError",
    "ErrorCode",
    "InvalidInputError",
    "InvalidVoiceSelectorError",
    "NotFoundError",
    "SynthesisFailedError",
    "StorageWriteFailedError",
    "CatalogWriteFailedError",
    "CatalogReadFailedError",
]
