"""
FastAPI Application Entry Point.

Usage:
    # Run with uvicorn
    uvicorn tts_vault.main:app --host 0.0.0.0 --port 8080

    # Local run without Google credentials
    TTS_VAULT_BACKEND=memory uvicorn tts_vault.main:app --reload
"""

from __future__ import annotations

import uuid
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from tts_vault import __version__
from tts_vault.api.dependencies import get_settings, get_synthesis_pipeline
from tts_vault.api.routes import config_error_handler, router
from tts_vault.core.config import ConfigValidationError, Settings
from tts_vault.core.logging import configure_logging, get_logger, info, set_request_id
from tts_vault.services.pipeline import SynthesisPipeline

_LOG = get_logger("tts-vault.app")


def create_app(
    pipeline: Optional[SynthesisPipeline] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        pipeline: Pipeline to serve instead of the process-wide singleton.
        settings: Settings used for CORS origins and the log level; defaults to the cached
            application settings (or the pipeline's config when given).

    Returns:
        FastAPI: Configured application instance.
    """
    if pipeline is not None:
        config = pipeline.config
    else:
        config = (settings or get_settings()).get_config()

    configure_logging(level=config.logging.level, force=True)

    app = FastAPI(title="tts-vault", version=__version__)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.api.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Length", "Content-Type"],
    )

    @app.middleware("http")
    async def assign_request_id(request: Request, call_next):
        # Route handlers run in the threadpool and rebind this id there
        rid = request.headers.get("X-Request-Id") or str(uuid.uuid4())[:12]
        request.state.request_id = rid
        set_request_id(rid)
        response = await call_next(request)
        response.headers["X-Request-Id"] = rid
        return response

    app.include_router(router)
    app.add_exception_handler(ConfigValidationError, config_error_handler)

    if pipeline is not None:
        app.dependency_overrides[get_synthesis_pipeline] = lambda: pipeline

    info(_LOG, "app_created", backend=config.backend, origins=len(config.api.cors_origins))
    return app


# Global application instance for ASGI servers (uvicorn, gunicorn, etc.)
app = create_app()
