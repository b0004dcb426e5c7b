"""
In-process collaborators.

Used by the test suite and by local runs without Google credentials
(backend: memory). Every instance keeps its state in a dict guarded by a
lock, so a single instance can be shared by request threads just like the
Google clients.

The fake synthesizer returns b"ID3" followed by the voice and text, which
makes stored bytes easy to assert on.
"""
from __future__ import annotations

import threading
from typing import Dict, List, Optional, Tuple

from tts_vault.tts.contracts import ObjectAttributes, StoredObject, SynthesisRecord, VoiceInfo

DEFAULT_VOICES: Tuple[VoiceInfo, ...] = (
    VoiceInfo("de-DE-Neural2-B", ["de-DE"], "MALE", 24000),
    VoiceInfo("en-GB-Standard-A", ["en-GB"], "FEMALE", 24000),
    VoiceInfo("en-US-Neural2-A", ["en-US"], "MALE", 24000),
    VoiceInfo("en-US-Wavenet-A", ["en-US"], "MALE", 24000),
    VoiceInfo("ja-JP-Standard-A", ["ja-JP"], "FEMALE", 24000),
    VoiceInfo("tr-TR-Wavenet-A", ["tr-TR"], "FEMALE", 24000),
)


class MemorySpeechSynthesizer:
    """
    Fake speech service.

    Attributes:
        calls: (language_code, voice_name, text, encoding) per synthesize().
        fail_with: Exception raised by the next calls while set.
    """

    name = "memory"

    def __init__(self, voices: Optional[List[VoiceInfo]] = None):
        self.voices: List[VoiceInfo] = list(voices) if voices is not None else list(DEFAULT_VOICES)
        self.calls: List[Tuple[str, str, str, str]] = []
        self.fail_with: Optional[Exception] = None
        self._lock = threading.Lock()

    def synthesize(self, language_code: str, voice_name: str, text: str, encoding: str = "MP3") -> bytes:
        with self._lock:
            self.calls.append((language_code, voice_name, text, encoding))
        if self.fail_with is not None:
            raise self.fail_with
        return b"ID3" + f"{voice_name}|{text}".encode("utf-8")

    def list_voices(self, language_code: Optional[str] = None) -> List[VoiceInfo]:
        if self.fail_with is not None:
            raise self.fail_with
        if not language_code:
            return list(self.voices)
        return [v for v in self.voices if language_code in v.language_codes]


class MemoryArtifactStore:
    """
    Fake object store.

    Public URLs look like <base_url>/<bucket>/<name>, mirroring the shape
    of a storage media link.
    """

    name = "memory"

    def __init__(self, bucket_name: str = "memory-bucket", base_url: str = "memory://local"):
        self._bucket_name = bucket_name
        self._base_url = base_url.rstrip("/")
        self.objects: Dict[str, bytes] = {}
        self.public: set = set()
        self.deleted: List[str] = []
        self.fail_writes_with: Optional[Exception] = None
        self.fail_deletes_with: Optional[Exception] = None
        self._lock = threading.Lock()

    @property
    def bucket_name(self) -> str:
        return self._bucket_name

    def _url(self, name: str) -> str:
        return f"{self._base_url}/{self._bucket_name}/{name}"

    def write_object(self, name: str, data: bytes) -> StoredObject:
        if self.fail_writes_with is not None:
            raise self.fail_writes_with
        with self._lock:
            self.objects[name] = bytes(data)
        return StoredObject(reference=f"gs://{self._bucket_name}/{name}", public_url=self._url(name))

    def set_public(self, name: str) -> None:
        with self._lock:
            if name not in self.objects:
                raise KeyError(name)
            self.public.add(name)

    def get_attributes(self, name: str) -> ObjectAttributes:
        with self._lock:
            if name not in self.objects:
                raise KeyError(name)
        return ObjectAttributes(public_url=self._url(name), bucket_name=self._bucket_name)

    def delete_object(self, name: str) -> None:
        if self.fail_deletes_with is not None:
            raise self.fail_deletes_with
        with self._lock:
            self.objects.pop(name, None)
            self.public.discard(name)
            self.deleted.append(name)


class MemoryCatalog:
    """Fake metadata catalog keyed by content key."""

    name = "memory"

    def __init__(self):
        self.records: Dict[str, SynthesisRecord] = {}
        self.fail_puts_with: Optional[Exception] = None
        self.fail_gets_with: Optional[Exception] = None
        self._lock = threading.Lock()

    def put(self, key: str, record: SynthesisRecord) -> None:
        if self.fail_puts_with is not None:
            raise self.fail_puts_with
        with self._lock:
            self.records[key] = record

    def get(self, key: str) -> Optional[SynthesisRecord]:
        if self.fail_gets_with is not None:
            raise self.fail_gets_with
        with self._lock:
            return self.records.get(key)
