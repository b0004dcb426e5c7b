"""
tts-vault API Routes.

Endpoints:
    POST /tts                        - Synthesize, store and catalog audio
    GET  /audio/{audio_id}           - Catalog record for a key or <key>.mp3
    GET  /audio/{audio_id}/play      - Minimal HTML player page
    GET  /listVoices/{languageCode}  - Voices for one language
    GET  /listLanguages              - All language codes with voices
    GET  /health                     - Health check
    GET  /metrics                    - Prometheus metrics

Error Handling:
    Errors are returned as JSON:
    {
        "ok": false,
        "error": "<ERROR_CODE>",
        "message": "<human readable message>",
        "details": {...},
        "request_id": "<id>"
    }

    HTTP status codes are mapped from VaultError codes:
        - INVALID_VOICE, INVALID_INPUT -> 400
        - NOT_FOUND -> 404
        - SYNTHESIS_FAILED -> 502
        - STORAGE_WRITE_FAILED, CATALOG_WRITE_FAILED, INTERNAL_ERROR -> 500
        - CATALOG_READ_FAILED, CONFIG_ERROR -> 503

Example Usage:
    curl -X POST http://localhost:8080/tts \\
        -H "Content-Type: application/json" \\
        -d '{"voiceName": "en-US-Neural2-A", "textNative": "Hello"}'
"""
from __future__ import annotations

import html

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import HTMLResponse, JSONResponse

from tts_vault.api.dependencies import get_synthesis_pipeline
from tts_vault.api.schemas import LanguagesResponse, TTSRequest, TTSResponse, VoicesResponse
from tts_vault.core.config import ConfigValidationError
from tts_vault.core.logging import fail, get_logger, get_request_id, set_request_id
from tts_vault.core.metrics import metrics
from tts_vault.errors import ErrorCode, VaultError
from tts_vault.services.pipeline import SynthesisPipeline, SynthesisRequest

router = APIRouter()

_LOG = get_logger("tts-vault.api")

STATUS_MAP = {
    ErrorCode.INVALID_VOICE: 400,
    ErrorCode.INVALID_INPUT: 400,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.SYNTHESIS_FAILED: 502,
    ErrorCode.STORAGE_WRITE_FAILED: 500,
    ErrorCode.CATALOG_WRITE_FAILED: 500,
    ErrorCode.CATALOG_READ_FAILED: 503,
    ErrorCode.INTERNAL_ERROR: 500,
    ErrorCode.CONFIG_ERROR: 503,
}

_PLAYER_PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{title}</title>
</head>
<body>
<h1>{voice}</h1>
<p class="native">{text_native}</p>
<p class="translated">{text_translated}</p>
<audio controls src="{audio_url}"></audio>
</body>
</html>
"""


def _bind_request_id(request: Request) -> str:
    """Adopt the id assigned by the request-id middleware in this thread."""
    rid = getattr(request.state, "request_id", None) or get_request_id()
    set_request_id(rid)
    return rid


def _error_response(error: VaultError, rid: str) -> JSONResponse:
    """Standard JSON error body with the status mapped from the error code."""
    content = error.to_dict()
    content["request_id"] = rid
    return JSONResponse(status_code=STATUS_MAP.get(error.code, 500), content=content)


def _internal_error(exc: Exception, rid: str) -> JSONResponse:
    fail(_LOG, "unhandled_error", error=str(exc), error_type=type(exc).__name__)
    return JSONResponse(
        status_code=500,
        content={
            "ok": False,
            "error": ErrorCode.INTERNAL_ERROR,
            "message": "Internal server error",
            "request_id": rid,
        },
    )


def config_error_handler(request: Request, exc: ConfigValidationError) -> JSONResponse:
    """Settings could not be turned into a pipeline (e.g. google backend without a bucket)."""
    rid = _bind_request_id(request)
    fail(_LOG, "pipeline_unavailable", error=str(exc))
    return JSONResponse(
        status_code=STATUS_MAP[ErrorCode.CONFIG_ERROR],
        content={
            "ok": False,
            "error": ErrorCode.CONFIG_ERROR,
            "message": str(exc),
            "request_id": rid,
        },
    )


@router.post("/tts")
def tts(
    req: TTSRequest,
    request: Request,
    pipeline: SynthesisPipeline = Depends(get_synthesis_pipeline),
):
    """
    Synthesize text, store the MP3 and write its catalog record.

    Returns:
        {"audioUrl": ..., "record": {...}, "reused": bool}
    """
    rid = _bind_request_id(request)
    try:
        result = pipeline.synthesize(
            SynthesisRequest(
                voice=req.voice_name,
                source_text=req.text_native,
                target_text=req.text_translated,
            ),
            request_id=rid,
        )
    except VaultError as e:
        return _error_response(e, rid)
    except Exception as e:
        return _internal_error(e, rid)

    body = TTSResponse(
        audio_url=result.playback_url,
        record=result.record.to_dict(),
        reused=result.reused,
    )
    return JSONResponse(content=body.model_dump(by_alias=True))


@router.get("/audio/{audio_id}")
def get_audio(
    audio_id: str,
    request: Request,
    pipeline: SynthesisPipeline = Depends(get_synthesis_pipeline),
):
    """Catalog record for a content key or artifact filename."""
    rid = _bind_request_id(request)
    try:
        record = pipeline.lookup(audio_id)
    except VaultError as e:
        return _error_response(e, rid)
    except Exception as e:
        return _internal_error(e, rid)
    return JSONResponse(content=record.to_dict())


@router.get("/audio/{audio_id}/play", response_class=HTMLResponse)
def play_audio(
    audio_id: str,
    request: Request,
    pipeline: SynthesisPipeline = Depends(get_synthesis_pipeline),
):
    """HTML page with an audio element for the stored artifact."""
    rid = _bind_request_id(request)
    try:
        record = pipeline.lookup(audio_id)
    except VaultError as e:
        return _error_response(e, rid)
    except Exception as e:
        return _internal_error(e, rid)

    page = _PLAYER_PAGE.format(
        title=html.escape(record.voice),
        voice=html.escape(record.voice),
        text_native=html.escape(record.source_text),
        text_translated=html.escape(record.target_text or ""),
        audio_url=html.escape(record.public_url, quote=True),
    )
    return HTMLResponse(content=page)


@router.get("/listVoices/{language_code}")
def list_voices(
    language_code: str,
    request: Request,
    pipeline: SynthesisPipeline = Depends(get_synthesis_pipeline),
):
    """Voices available for one language code, e.g. "en-US"."""
    rid = _bind_request_id(request)
    try:
        voices = pipeline.list_voices(language_code)
    except VaultError as e:
        return _error_response(e, rid)
    except Exception as e:
        return _internal_error(e, rid)
    return VoicesResponse(voices=[v.to_dict() for v in voices])


@router.get("/listLanguages")
def list_languages(
    request: Request,
    pipeline: SynthesisPipeline = Depends(get_synthesis_pipeline),
):
    """Sorted language codes across every available voice."""
    rid = _bind_request_id(request)
    try:
        languages = pipeline.list_languages()
    except VaultError as e:
        return _error_response(e, rid)
    except Exception as e:
        return _internal_error(e, rid)
    return LanguagesResponse(languages=languages)


@router.get("/health")
def health(pipeline: SynthesisPipeline = Depends(get_synthesis_pipeline)):
    """Backend identity and pipeline switches."""
    return pipeline.get_health_info()


@router.get("/metrics")
def prometheus_metrics():
    """Prometheus metrics in text exposition format."""
    content, content_type = metrics.get_metrics_response()
    return Response(content=content, media_type=content_type)
