"""
Google Cloud Text-to-Speech synthesizer.

Wraps a single TextToSpeechClient created at startup. The client is
thread-safe and reused by every request.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from google.cloud import texttospeech

from tts_vault.core.logging import debug, get_logger
from tts_vault.tts.contracts import VoiceInfo

_LOG = get_logger("tts-vault.google-tts")


class GoogleSpeechSynthesizer:
    """
    SpeechSynthesizer backed by Cloud Text-to-Speech.

    Args:
        client: Existing TextToSpeechClient (tests pass a mock).
        timeout_s: Per-call timeout handed to the client; None keeps the
            library default.
    """

    name = "google"

    def __init__(self, client: Optional[texttospeech.TextToSpeechClient] = None, timeout_s: Optional[float] = None):
        self._client = client if client is not None else texttospeech.TextToSpeechClient()
        self._call_kwargs: Dict[str, Any] = {"timeout": timeout_s} if timeout_s is not None else {}

    def synthesize(self, language_code: str, voice_name: str, text: str, encoding: str = "MP3") -> bytes:
        request = texttospeech.SynthesizeSpeechRequest(
            input=texttospeech.SynthesisInput(text=text),
            voice=texttospeech.VoiceSelectionParams(
                language_code=language_code,
                name=voice_name,
            ),
            audio_config=texttospeech.AudioConfig(
                audio_encoding=texttospeech.AudioEncoding[encoding.upper()],
            ),
        )
        debug(_LOG, "synthesize_speech", language=language_code, voice=voice_name, chars=len(text))
        response = self._client.synthesize_speech(request=request, **self._call_kwargs)
        return response.audio_content

    def list_voices(self, language_code: Optional[str] = None) -> List[VoiceInfo]:
        request = texttospeech.ListVoicesRequest(language_code=language_code or "")
        response = self._client.list_voices(request=request, **self._call_kwargs)
        return [
            VoiceInfo(
                name=voice.name,
                language_codes=list(voice.language_codes),
                ssml_gender=texttospeech.SsmlVoiceGender(voice.ssml_gender).name,
                natural_sample_rate_hertz=int(voice.natural_sample_rate_hertz),
            )
            for voice in response.voices
        ]
