"""
SynthesisPipeline - text in, stored audio and catalog record out.

Both the HTTP API and the CLI go through this class.

Architecture:
    Validate -> Key -> (Reuse check) -> Synthesize -> Upload -> Catalog -> Result

Every stage blocks on one remote call and runs at most once per request.
A failing stage stops the pipeline; later stages never run:

    synthesis fails  -> SynthesisFailedError, nothing stored
    upload fails     -> StorageWriteFailedError, no record written
                        again unless pipeline.cleanup_orphans is off
                        or a record for the key already points at it
                        again unless pipeline.cleanup_orphans is off

Content key:
    compute_key(voice, source_text). The spoken text is the translation
    when one is given, but the key is always derived from the source text,
    so all translations of one source under one voice share a single
    artifact and the most recent request wins.

Example:
    >>> from tts_vault.core.config import load_settings
    >>> from tts_vault.services.pipeline import SynthesisRequest, get_pipeline
    >>>
    >>> pipeline = get_pipeline(load_settings())
    >>> result = pipeline.synthesize(
    ...     SynthesisRequest(voice="en-US-Neural2-A", source_text="Hello"),
    ...     request_id="req-1",
    ... )
    >>> print(result.playback_url)
"""
from __future__ import annotations

import threading
from contextlib import nullcontext
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from tts_vault.core.config import Settings, VaultConfig
from tts_vault.core.logging import debug, error, fail, get_logger, info, success, verbose, warn
from tts_vault.core.metrics import metrics
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
from tts_vault.services.locks import KeyedLock
from tts_vault.services.validators import (
    ValidationError,
    validate_language_code,
    validate_optional_text,
    validate_text,
    validate_voice,
)
from tts_vault.tts.addressing import artifact_name, compute_key, key_from_identifier, resolve_language_code
from tts_vault.tts.backends import get_backends
from tts_vault.tts.contracts import (
    ArtifactStore,
    MetadataCatalog,
    SpeechSynthesizer,
    SynthesisRecord,
    VoiceInfo,
)
from tts_vault.utils.timeit import timeit

_LOG = get_logger("tts-vault.pipeline")


# =============================================================================
# Request/Response Dataclasses
# =============================================================================

@dataclass
class SynthesisRequest:
    """
    Request for one synthesis.

    Attributes:
        voice: Voice selector, e.g. "en-US-Neural2-A".
        source_text: Text the content key is derived from.
        target_text: Optional translation; spoken instead of source_text.
    """
    voice: str
    source_text: str
    target_text: Optional[str] = None


@dataclass
class SynthesisResult:
    """
    Result of a synthesis.

    Attributes:
        record: Catalog record for the stored artifact.
        playback_url: URL under this service that serves the artifact.
        reused: True when an existing record was returned without
            synthesizing (pipeline.reuse_existing).
        timings: Per-stage durations in seconds.
        request_id: Request ID for tracing.
    """
    record: SynthesisRecord
    playback_url: str
    reused: bool = False
    timings: Dict[str, float] = field(default_factory=dict)
    request_id: str = "-"


# =============================================================================
# Pipeline
# =============================================================================

class SynthesisPipeline:
    """
    Orchestrates synthesizer, artifact store and metadata catalog.

    Collaborators are injected; the pipeline holds no per-request state and
    one instance serves all request threads.

    Usage:
        pipeline = SynthesisPipeline(synthesizer, store, catalog, config)
        result = pipeline.synthesize(SynthesisRequest("en-US-Wavenet-A", "Hello"))
        record = pipeline.lookup(result.record.file_name)
    """

    def __init__(
        self,
        synthesizer: SpeechSynthesizer,
        store: ArtifactStore,
        catalog: MetadataCatalog,
        config: Optional[VaultConfig] = None,
        backend_name: str = "custom",
    ):
        self._synthesizer = synthesizer
        self._store = store
        self._catalog = catalog
        self._config = config or VaultConfig()
        self._backend_name = backend_name
        self._locks: Optional[KeyedLock] = KeyedLock() if self._config.pipeline.per_key_lock else None

        info(_LOG, "pipeline_ready",
             backend=backend_name,
             reuse_existing=self._config.pipeline.reuse_existing,
             cleanup_orphans=self._config.pipeline.cleanup_orphans,
             per_key_lock=self._config.pipeline.per_key_lock)

    @classmethod
    def from_settings(cls, settings: Settings) -> "SynthesisPipeline":
        """Build the configured backends and wire a pipeline around them."""
        config = settings.get_config()
        backends = get_backends(config)
        return cls(
            backends.synthesizer,
            backends.store,
            backends.catalog,
            config,
            backend_name=backends.name,
        )

    @property
    def config(self) -> VaultConfig:
        return self._config

    @property
    def backend_name(self) -> str:
        return self._backend_name

    def playback_url(self, file_name: str) -> str:
        """URL of the playback route for a stored artifact."""
        return self._config.api.public_base_url.rstrip("/") + "/audio/" + file_name

    # =========================================================================
    # Public API: synthesize()
    # =========================================================================

    def synthesize(self, request: SynthesisRequest, request_id: str = "-") -> SynthesisResult:
        """
        Synthesize, store and catalog one request.

        Args:
            request: Voice and texts.
            request_id: Request ID for tracing.

        Returns:
            SynthesisResult with the record and playback URL.

        Raises:
            InvalidInputError: Text missing or too long.
            InvalidVoiceSelectorError: Voice name malformed.
            SynthesisFailedError: Speech service failed.
            StorageWriteFailedError: Upload or ACL change failed.
            CatalogWriteFailedError: Record could not be written.
        """
        try:
            result = self._synthesize(request, request_id)
        except VaultError as e:
            metrics.record_request("synthesize", e.code)
            raise
        except Exception as e:
            fail(_LOG, "request_failed", error=str(e), error_type=type(e).__name__)
            metrics.record_request("synthesize", ErrorCode.INTERNAL_ERROR)
            raise VaultError(
                f"Unexpected error: {e}",
                ErrorCode.INTERNAL_ERROR,
                {"error_type": type(e).__name__},
            ) from e

        metrics.record_request("synthesize", "reused" if result.reused else "success")
        return result

    def _synthesize(self, request: SynthesisRequest, request_id: str) -> SynthesisResult:
        max_chars = self._config.pipeline.max_text_chars

        try:
            voice = validate_voice(request.voice)
        except ValidationError as e:
            warn(_LOG, "invalid_voice", code=e.code, error=e.message)
            raise InvalidVoiceSelectorError(e.message, {"voice": request.voice, "reason": e.code}) from e

        try:
            source_text = validate_text(request.source_text, max_chars, "textNative")
            target_text = validate_optional_text(request.target_text, max_chars, "textTranslated")
        except ValidationError as e:
            warn(_LOG, "invalid_input", code=e.code, error=e.message)
            raise InvalidInputError(e.message, {"reason": e.code}) from e

        language_code = resolve_language_code(voice)
        key = compute_key(voice, source_text)

        preview_chars = self._config.logging.text_preview_chars
        preview = source_text[:preview_chars] if preview_chars > 0 else ""
        info(_LOG, "request", voice=voice, key=key, chars=len(source_text),
             translated=target_text is not None, text_preview=preview)
        debug(_LOG, "request_full", voice=voice, language=language_code,
              text_native=source_text, text_translated=target_text)

        guard = self._locks.hold(key) if self._locks is not None else nullcontext()
        with guard:
            return self._run_stages(key, voice, language_code, source_text, target_text, request_id)

    def _run_stages(
        self,
        key: str,
        voice: str,
        language_code: str,
        source_text: str,
        target_text: Optional[str],
        request_id: str,
    ) -> SynthesisResult:
        timings: Dict[str, float] = {}
        name = artifact_name(key)

        # ─────────────────────────────────────────────────────────────────────
        # Stage 1: Reuse an existing record
        # ─────────────────────────────────────────────────────────────────────
        if self._config.pipeline.reuse_existing:
            existing = self._find_existing(key, timings)
            if existing is not None:
                metrics.inc_reused()
                success(_LOG, "reused", key=key)
                return SynthesisResult(
                    record=existing,
                    playback_url=self.playback_url(existing.file_name or name),
                    reused=True,
                    timings=timings,
                    request_id=request_id,
                )

        # ─────────────────────────────────────────────────────────────────────
        # Stage 2: Synthesize
        # ─────────────────────────────────────────────────────────────────────
        spoken_text = target_text if target_text is not None else source_text
        try:
            with timeit("synth") as t_synth:
                audio = self._synthesizer.synthesize(
                    language_code, voice, spoken_text, self._config.google.audio_encoding,
                )
        except Exception as e:
            self._record_stage(timings, t_synth)
            fail(_LOG, "synthesis_failed", key=key, voice=voice,
                 error=str(e), error_type=type(e).__name__)
            raise SynthesisFailedError(
                f"speech synthesis failed: {e}",
                {"key": key, "voice": voice, "error_type": type(e).__name__},
            ) from e
        self._record_stage(timings, t_synth, bytes=len(audio))

        # ─────────────────────────────────────────────────────────────────────
        # Stage 3: Upload and publish
        # ─────────────────────────────────────────────────────────────────────
        try:
            with timeit("upload") as t_upload:
                stored = self._store.write_object(name, audio)
                if self._config.storage.make_public:
                    self._store.set_public(name)
                attrs = self._store.get_attributes(name)
        except Exception as e:
            self._record_stage(timings, t_upload)
            fail(_LOG, "storage_write_failed", key=key, file_name=name,
                 error=str(e), error_type=type(e).__name__)
            raise StorageWriteFailedError(
                f"artifact upload failed: {e}",
                {"key": key, "file_name": name, "error_type": type(e).__name__},
            ) from e
        self._record_stage(timings, t_upload)
        metrics.add_audio_bytes(len(audio))

        record = SynthesisRecord(
            key=key,
            voice=voice,
            source_text=source_text,
            target_text=target_text,
            file_name=name,
            storage_reference=stored.reference,
            public_url=attrs.public_url or stored.public_url,
        )

        # ─────────────────────────────────────────────────────────────────────
        # Stage 4: Catalog
        # ─────────────────────────────────────────────────────────────────────
        try:
            with timeit("catalog_put") as t_catalog:
                self._catalog.put(key, record)
        except Exception as e:
            self._record_stage(timings, t_catalog)
            fail(_LOG, "catalog_write_failed", key=key,
                 error=str(e), error_type=type(e).__name__)
            deleted, kept_reason = self._discard_artifact(name, key)
            details = {
                "key": key,
                "file_name": name,
                "artifact_deleted": deleted,
                "error_type": type(e).__name__,
            }
            if kept_reason:
                details["artifact_kept_reason"] = kept_reason
            raise CatalogWriteFailedError(f"catalog write failed: {e}", details) from e
        self._record_stage(timings, t_catalog)

        total = sum(timings.values())
        success(_LOG, "done", key=key, bytes=len(audio), seconds=round(total, 3))

        return SynthesisResult(
            record=record,
            playback_url=self.playback_url(name),
            reused=False,
            timings=timings,
            request_id=request_id,
        )

    def _find_existing(self, key: str, timings: Dict[str, float]) -> Optional[SynthesisRecord]:
        """Catalog pre-check. Read errors count as a miss."""
        try:
            with timeit("reuse_lookup") as t:
                existing = self._catalog.get(key)
        except Exception as e:
            self._record_stage(timings, t)
            warn(_LOG, "reuse_lookup_failed", key=key, error=str(e), error_type=type(e).__name__)
            return None
        self._record_stage(timings, t, hit=existing is not None)
        return existing

    def _discard_artifact(self, name: str, key: str) -> tuple[bool, Optional[str]]:
        """
        Remove an uploaded object whose record could not be written.

        The object name is shared by every request for the same key, so the
        object is kept when a record from an earlier request still points
        at it, or when that cannot be ruled out.

        Returns:
            (deleted, reason the object was kept or None)
        """
        if not self._config.pipeline.cleanup_orphans:
            error(_LOG, "orphaned_artifact", key=key, file_name=name, reason="cleanup_disabled")
            metrics.inc_orphaned()
            return False, "cleanup_disabled"

        try:
            existing = self._catalog.get(key)
        except Exception as e:
            error(_LOG, "orphaned_artifact", key=key, file_name=name, reason="record_check_failed",
                  error=str(e), error_type=type(e).__name__)
            metrics.inc_orphaned()
            return False, "record_check_failed"

        if existing is not None:
            warn(_LOG, "artifact_kept", key=key, file_name=name, reason="existing_record")
            return False, "existing_record"

        try:
            self._store.delete_object(name)
        except Exception as e:
            error(_LOG, "orphaned_artifact", key=key, file_name=name, reason="delete_failed",
                  error=str(e), error_type=type(e).__name__)
            metrics.inc_orphaned()
            return False, "delete_failed"

        info(_LOG, "artifact_deleted", key=key, file_name=name)
        return True, None

    @staticmethod
    def _record_stage(timings: Dict[str, float], t: timeit, **fields: Any) -> None:
        if t.timing is None:
            return
        timings[t.name] = t.timing.seconds
        metrics.observe_stage(t.name, t.timing.seconds)
        verbose(_LOG, "stage", event=t.name, seconds=round(t.timing.seconds, 4), **fields)

    # =========================================================================
    # Public API: lookup()
    # =========================================================================

    def lookup(self, identifier: str) -> SynthesisRecord:
        """
        Fetch the record for a key or artifact filename.

        Raises:
            NotFoundError: No record for the key.
            CatalogReadFailedError: The catalog could not be read.
        """
        key = key_from_identifier(identifier or "")
        if not key:
            metrics.record_request("lookup", ErrorCode.NOT_FOUND)
            raise NotFoundError("audio identifier is empty", {"key": key})

        try:
            with timeit("lookup") as t:
                record = self._catalog.get(key)
        except Exception as e:
            fail(_LOG, "catalog_read_failed", key=key, error=str(e), error_type=type(e).__name__)
            metrics.record_request("lookup", ErrorCode.CATALOG_READ_FAILED)
            raise CatalogReadFailedError(
                f"catalog read failed: {e}",
                {"key": key, "error_type": type(e).__name__},
            ) from e

        if t.timing is not None:
            metrics.observe_stage("lookup", t.timing.seconds)

        if record is None:
            info(_LOG, "lookup_miss", key=key)
            metrics.record_request("lookup", ErrorCode.NOT_FOUND)
            raise NotFoundError(f"audio not found: {key}", {"key": key})

        verbose(_LOG, "lookup_hit", key=key)
        metrics.record_request("lookup", "success")
        return record

    # =========================================================================
    # Voice catalog
    # =========================================================================

    def list_voices(self, language_code: Optional[str] = None) -> List[VoiceInfo]:
        """
        Voices offered by the speech service.

        Args:
            language_code: Optional filter, e.g. "en-US". Blank means all.

        Raises:
            InvalidInputError: language_code given but too long.
            SynthesisFailedError: The speech service could not be queried.
        """
        if language_code is not None and language_code.strip():
            try:
                language_code = validate_language_code(language_code)
            except ValidationError as e:
                raise InvalidInputError(e.message, {"reason": e.code}) from e
        else:
            language_code = None

        try:
            voices = self._synthesizer.list_voices(language_code)
        except Exception as e:
            fail(_LOG, "list_voices_failed", language=language_code,
                 error=str(e), error_type=type(e).__name__)
            metrics.record_request("list_voices", ErrorCode.SYNTHESIS_FAILED)
            raise SynthesisFailedError(
                f"failed to list voices: {e}",
                {"language_code": language_code, "error_type": type(e).__name__},
            ) from e

        metrics.record_request("list_voices", "success")
        verbose(_LOG, "voices_listed", language=language_code, count=len(voices))
        return voices

    def list_languages(self) -> List[str]:
        """Sorted, de-duplicated language codes across all voices."""
        voices = self.list_voices(None)
        return sorted({code for voice in voices for code in voice.language_codes})

    # =========================================================================
    # Health Check
    # =========================================================================

    def get_health_info(self) -> Dict[str, Any]:
        """Backend identity and the switches that change pipeline behaviour."""
        return {
            "ok": True,
            "backend": self._backend_name,
            "bucket": self._config.storage.bucket,
            "collection": self._config.catalog.collection,
            "public_base_url": self._config.api.public_base_url,
            "pipeline": {
                "make_public": self._config.storage.make_public,
                "reuse_existing": self._config.pipeline.reuse_existing,
                "cleanup_orphans": self._config.pipeline.cleanup_orphans,
                "per_key_lock": self._config.pipeline.per_key_lock,
                "max_text_chars": self._config.pipeline.max_text_chars,
            },
        }


# =============================================================================
# Global Pipeline Singleton
# =============================================================================

_pipeline: Optional[SynthesisPipeline] = None
_pipeline_lock = threading.Lock()


def get_pipeline(settings: Settings) -> SynthesisPipeline:
    """
    Get or create the global SynthesisPipeline instance.

    Thread-safe lazy singleton. Backend clients are created on the first
    call and shared by every later request.
    """
    global _pipeline
    if _pipeline is None:
        with _pipeline_lock:
            if _pipeline is None:
                _pipeline = SynthesisPipeline.from_settings(settings)
    return _pipeline


def reset_pipeline() -> None:
    """
    Reset the global pipeline instance.

    Used primarily for testing to ensure clean state between tests.
    """
    global _pipeline
    with _pipeline_lock:
        _pipeline = None
