"""
FastAPI REST API Layer for tts-vault.

    - routes.py: /tts, /audio, voice listings, /health, /metrics
    - schemas.py: Request/response Pydantic models
    - dependencies.py: FastAPI dependency injection
"""
