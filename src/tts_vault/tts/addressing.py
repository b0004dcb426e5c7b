"""
Content addressing for synthesized audio.

A content key is the SHA-256 of the voice name immediately followed by the
source text, rendered as 64 lowercase hex characters. The same key names
the stored object (<key>.mp3) and the catalog record, so identical
(voice, text) pairs always land on the same artifact.

There is no separator between voice and text. ("ab", "cd") and
("a", "bcd") produce the same key. Real voice names always end in a
variant segment, which makes such collisions unlikely in practice, but
callers should not rely on keys being unique per pair.

Voice selectors look like "en-US-Neural2-A": the first two hyphen-separated
segments form the language-region code passed to the speech service, the
remainder is the provider's voice variant.
"""
from __future__ import annotations

import hashlib

from tts_vault.errors import InvalidVoiceSelectorError

ARTIFACT_EXTENSION = ".mp3"


def compute_key(voice: str, text: str) -> str:
    """
    Derive the content key for a (voice, text) pair.

    Args:
        voice: Voice selector, e.g. "en-US-Wavenet-A".
        text: Source text.

    Returns:
        64-character lowercase hex SHA-256 digest of voice + text.

    Example:
        >>> compute_key("en-US-Wavenet-A", "Hello, world!")
        '905299e95c365d6bcfe81de24c5d02a9ccb4e9c1bcf259df53691dde88a9def0'
    """
    return hashlib.sha256((voice + text).encode("utf-8")).hexdigest()


def artifact_name(key: str) -> str:
    """Storage object name for a content key."""
    return key + ARTIFACT_EXTENSION


def key_from_identifier(identifier: str) -> str:
    """
    Accept either a bare key or an artifact filename and return the key.

    Playback URLs end in <key>.mp3 while the catalog is keyed by <key>.
    """
    identifier = identifier.strip()
    if identifier.endswith(ARTIFACT_EXTENSION):
        return identifier[: -len(ARTIFACT_EXTENSION)]
    return identifier


def split_voice(voice: str) -> tuple[str, str, str]:
    """
    Split a voice selector into (language, region, variant).

    The variant keeps any further hyphens ("Neural2-A").

    Raises:
        InvalidVoiceSelectorError: If there are fewer than three segments.
    """
    parts = voice.split("-", 2)
    if len(parts) < 3:
        raise InvalidVoiceSelectorError(
            f"invalid voice name: {voice}",
            {"voice": voice},
        )
    return parts[0], parts[1], parts[2]


def resolve_language_code(voice: str) -> str:
    """
    Language-region code of a voice selector.

    >>> resolve_language_code("en-US-Neural2-A")
    'en-US'
    """
    language, region, _ = split_voice(voice)
    return f"{language}-{region}"
