"""
API Request/Response Schemas.

Field names on the wire are camelCase (voiceName, textNative,
textTranslated, audioUrl) so that existing web clients keep working.
Requests also accept the snake_case names.

Example Request:
    {
        "voiceName": "de-DE-Neural2-B",
        "textNative": "Good morning",
        "textTranslated": "Guten Morgen"
    }

Example Response:
    {
        "audioUrl": "http://localhost:8080/audio/<key>.mp3",
        "record": {"key": "...", "voiceName": "...", ...},
        "reused": false
    }
"""
from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field


class TTSRequest(BaseModel):
    """
    Synthesis request for POST /tts.

    Attributes:
        voice_name: Voice selector such as "en-US-Neural2-A"; the first two
            segments pick the language.
        text_native: Source text. The content key is derived from it.
        text_translated: Optional translation. When present it is the text
            that gets spoken.
    """
    model_config = ConfigDict(populate_by_name=True)

    voice_name: str = Field(
        ...,
        alias="voiceName",
        description="Voice selector, e.g. 'en-US-Neural2-A'",
    )
    text_native: str = Field(
        ...,
        alias="textNative",
        description="Source text; the content key is derived from it",
    )
    text_translated: str | None = Field(
        default=None,
        alias="textTranslated",
        description="Optional translation, spoken instead of textNative",
    )


class TTSResponse(BaseModel):
    """Successful POST /tts response."""
    model_config = ConfigDict(populate_by_name=True)

    audio_url: str = Field(..., alias="audioUrl", description="Playback URL under this service")
    record: Dict[str, Any] = Field(..., description="Catalog record for the stored artifact")
    reused: bool = Field(default=False, description="True when an existing record was returned")


class VoicesResponse(BaseModel):
    """GET /listVoices/{languageCode} response."""
    voices: List[Dict[str, Any]]


class LanguagesResponse(BaseModel):
    """GET /listLanguages response."""
    languages: List[str]
