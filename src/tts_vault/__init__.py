"""
tts-vault: content-addressed text-to-speech storage service.

Turns (voice, text) into a stored MP3 whose name is the SHA-256 of the
voice and source text, records it in a metadata catalog and hands back a
playback URL.

Backends:
    - google: Cloud Text-to-Speech, Cloud Storage and Firestore
    - memory: in-process fakes for tests and local runs

Example Usage:
    >>> from tts_vault.core.config import Settings
    >>> from tts_vault.services import SynthesisPipeline, SynthesisRequest
    >>>
    >>> pipeline = SynthesisPipeline.from_settings(Settings(raw={"backend": "memory"}))
    >>> result = pipeline.synthesize(SynthesisRequest("en-US-Wavenet-A", "Hello"))
    >>> print(result.playback_url)
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
