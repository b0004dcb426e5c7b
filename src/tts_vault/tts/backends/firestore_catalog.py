"""
Firestore metadata catalog.

One document per content key in a single collection (default "audio").
Document fields follow SynthesisRecord.to_dict().
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from google.cloud import firestore

from tts_vault.tts.contracts import SynthesisRecord


class FirestoreCatalog:
    """
    MetadataCatalog backed by a Firestore collection.

    Args:
        collection: Collection name.
        client: Existing firestore.Client (tests pass a mock).
        project: Project for a newly created client.
        timeout_s: Per-call timeout; None keeps the library default.
    """

    name = "firestore"

    def __init__(
        self,
        collection: str = "audio",
        client: Optional[firestore.Client] = None,
        project: Optional[str] = None,
        timeout_s: Optional[float] = None,
    ):
        self._client = client if client is not None else firestore.Client(project=project or None)
        self._collection = collection
        self._call_kwargs: Dict[str, Any] = {"timeout": timeout_s} if timeout_s is not None else {}

    @property
    def collection(self) -> str:
        return self._collection

    def _doc(self, key: str):
        return self._client.collection(self._collection).document(key)

    def put(self, key: str, record: SynthesisRecord) -> None:
        self._doc(key).set(record.to_dict(), **self._call_kwargs)

    def get(self, key: str) -> Optional[SynthesisRecord]:
        snapshot = self._doc(key).get(**self._call_kwargs)
        if not snapshot.exists:
            return None
        return SynthesisRecord.from_dict(snapshot.to_dict() or {}, key=snapshot.id)
