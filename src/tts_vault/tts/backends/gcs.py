"""
Google Cloud Storage artifact store.

Objects are uploaded with upload_from_string() into a single bucket. The
URL handed back is the blob's media link, which serves the bytes directly
once the object has been made public.

Buckets with uniform bucket-level access reject per-object ACLs; for those
set storage.make_public: false and grant allUsers read on the bucket.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from google.api_core import exceptions as google_exceptions
from google.cloud import storage

from tts_vault.core.logging import debug, get_logger
from tts_vault.tts.contracts import ObjectAttributes, StoredObject

_LOG = get_logger("tts-vault.gcs")


class GCSArtifactStore:
    """
    ArtifactStore backed by one Cloud Storage bucket.

    Args:
        bucket_name: Target bucket.
        client: Existing storage.Client (tests pass a mock).
        project: Project for a newly created client.
        content_type: Content type set on every upload.
        timeout_s: Per-call timeout; None keeps the library default.
    """

    name = "gcs"

    def __init__(
        self,
        bucket_name: str,
        client: Optional[storage.Client] = None,
        project: Optional[str] = None,
        content_type: str = "audio/mpeg",
        timeout_s: Optional[float] = None,
    ):
        self._client = client if client is not None else storage.Client(project=project or None)
        self._bucket = self._client.bucket(bucket_name)
        self._bucket_name = bucket_name
        self._content_type = content_type
        self._call_kwargs: Dict[str, Any] = {"timeout": timeout_s} if timeout_s is not None else {}

    @property
    def bucket_name(self) -> str:
        return self._bucket_name

    def reference_for(self, name: str) -> str:
        return f"gs://{self._bucket_name}/{name}"

    def write_object(self, name: str, data: bytes) -> StoredObject:
        blob = self._bucket.blob(name)
        blob.upload_from_string(data, content_type=self._content_type, **self._call_kwargs)
        debug(_LOG, "object_written", name=name, bytes=len(data))
        return StoredObject(
            reference=self.reference_for(name),
            public_url=blob.media_link or blob.public_url,
        )

    def set_public(self, name: str) -> None:
        self._bucket.blob(name).make_public(**self._call_kwargs)

    def get_attributes(self, name: str) -> ObjectAttributes:
        blob = self._bucket.get_blob(name, **self._call_kwargs)
        if blob is None:
            raise google_exceptions.NotFound(f"object not found: {self.reference_for(name)}")
        return ObjectAttributes(public_url=blob.media_link, bucket_name=self._bucket_name)

    def delete_object(self, name: str) -> None:
        try:
            self._bucket.blob(name).delete(**self._call_kwargs)
        except google_exceptions.NotFound:
            debug(_LOG, "object_already_absent", name=name)
