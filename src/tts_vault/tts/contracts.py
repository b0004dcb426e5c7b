"""
Collaborator contracts and the records that cross them.

The pipeline talks to three remote systems through these protocols:

    SpeechSynthesizer   text -> encoded audio bytes
    ArtifactStore       named blob -> durable object with a public URL
    MetadataCatalog     content key -> SynthesisRecord

Implementations must be safe to share across request threads; one instance
of each is created at startup and reused (see tts/backends).

Two implementations ship with the package:
    - backends.google_tts / backends.gcs / backends.firestore_catalog
    - backends.memory (in-process, used by tests and local runs)
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable


@dataclass(frozen=True)
class VoiceInfo:
    """A voice offered by the speech service."""
    name: str
    language_codes: List[str] = field(default_factory=list)
    ssml_gender: str = "SSML_VOICE_GENDER_UNSPECIFIED"
    natural_sample_rate_hertz: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "languageCode": list(self.language_codes),
            "ssmlGender": self.ssml_gender,
            "naturalSampleRateHertz": self.natural_sample_rate_hertz,
        }


@dataclass(frozen=True)
class StoredObject:
    """
    Result of an artifact write.

    Attributes:
        reference: Storage URI, e.g. gs://bucket/<key>.mp3.
        public_url: URL the object can be fetched from.
    """
    reference: str
    public_url: str


@dataclass(frozen=True)
class ObjectAttributes:
    """Attributes read back from the store after a write."""
    public_url: str
    bucket_name: str


@dataclass(frozen=True)
class SynthesisRecord:
    """
    Catalog entry describing one stored artifact.

    Written right after the artifact upload succeeds, keyed by the content
    key. The catalog document uses the field names of the existing audio
    collection (voiceName, textNative, ...) so older documents stay readable.
    """
    key: str
    voice: str
    source_text: str
    file_name: str
    storage_reference: str
    public_url: str
    target_text: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Catalog document / API representation."""
        return {
            "key": self.key,
            "voiceName": self.voice,
            "textNative": self.source_text,
            "textTranslated": self.target_text,
            "fileName": self.file_name,
            "audioRef": self.storage_reference,
            "url": self.public_url,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], key: Optional[str] = None) -> "SynthesisRecord":
        """
        Rebuild a record from a catalog document.

        Args:
            data: Document fields as written by to_dict().
            key: Document id, used when the document predates the key field.
        """
        file_name = data.get("fileName", "")
        resolved_key = data.get("key") or key
        if not resolved_key and file_name.endswith(".mp3"):
            resolved_key = file_name[:-4]
        return cls(
            key=resolved_key or "",
            voice=data.get("voiceName", ""),
            source_text=data.get("textNative", ""),
            target_text=data.get("textTranslated") or None,
            file_name=file_name,
            storage_reference=data.get("audioRef", ""),
            public_url=data.get("url", ""),
        )


@runtime_checkable
class SpeechSynthesizer(Protocol):
    """Turns text into encoded audio."""

    def synthesize(self, language_code: str, voice_name: str, text: str, encoding: str = "MP3") -> bytes:
        """
        Synthesize text with the named voice.

        Raises:
            Exception: Any failure; the pipeline wraps it as SynthesisFailedError.
        """
        ...

    def list_voices(self, language_code: Optional[str] = None) -> List[VoiceInfo]:
        """Voices available, optionally filtered by language code."""
        ...


@runtime_checkable
class ArtifactStore(Protocol):
    """Durable named blob storage."""

    def write_object(self, name: str, data: bytes) -> StoredObject:
        ...

    def set_public(self, name: str) -> None:
        """Make the object readable by anyone."""
        ...

    def get_attributes(self, name: str) -> ObjectAttributes:
        ...

    def delete_object(self, name: str) -> None:
        """Remove the object. Deleting a missing object is not an error."""
        ...


@runtime_checkable
class MetadataCatalog(Protocol):
    """Keyed record storage."""

    def put(self, key: str, record: SynthesisRecord) -> None:
        """Create or overwrite the record for key."""
        ...

    def get(self, key: str) -> Optional[SynthesisRecord]:
        """
        Fetch the record for key.

        Returns:
            The record, or None when the key is absent.

        Raises:
            Exception: Transient read failures.
        """
        ...
