"""
Command-Line Interface for tts-vault.

Runs the pipeline without the HTTP server.

Usage Examples:
    # Content key for a (voice, text) pair, no remote calls
    tts-vault key en-US-Wavenet-A "Hello, world!"

    # Synthesize, store and catalog
    tts-vault synth en-US-Neural2-A "Good morning" --translated "Guten Morgen"

    # Same pipeline against in-process fakes
    tts-vault --backend memory synth en-US-Neural2-A "Hello" --json

    # Catalog record for a key or <key>.mp3
    tts-vault lookup 905299e95c365d6bcfe81de24c5d02a9ccb4e9c1bcf259df53691dde88a9def0

    # Voice listings
    tts-vault voices en-US
    tts-vault languages

Environment Variables:
    TTS_VAULT_SETTINGS: Settings file (default config/settings.yaml)
    TTS_VAULT_BACKEND: google | memory
    GOOGLE_PROJECT_ID, FIREBASE_STORAGE_BUCKET: Google project and bucket
"""

from __future__ import annotations

import argparse
import json
from typing import Any, List, Optional
from uuid import uuid4

from tts_vault.core.config import ConfigValidationError, Settings, load_settings
from tts_vault.core.logging import configure_logging, get_logger, info, set_request_id
from tts_vault.errors import ErrorCode, VaultError
from tts_vault.tts.addressing import artifact_name, compute_key, resolve_language_code


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="tts-vault CLI (content-addressed TTS storage)")
    parser.add_argument("--settings", help="Settings YAML path")
    parser.add_argument("--backend", choices=["google", "memory"], help="Backend override")
    parser.add_argument("--json", action="store_true", help="Print JSON output")

    sub = parser.add_subparsers(dest="command", required=True)

    p_key = sub.add_parser("key", help="Print the content key for a voice and text")
    p_key.add_argument("voice")
    p_key.add_argument("text")

    p_synth = sub.add_parser("synth", help="Synthesize, store and catalog audio")
    p_synth.add_argument("voice")
    p_synth.add_argument("text", help="Source text (the content key is derived from it)")
    p_synth.add_argument("--translated", help="Translation to speak instead of the source text")

    p_lookup = sub.add_parser("lookup", help="Show the catalog record for a key or filename")
    p_lookup.add_argument("identifier")

    p_voices = sub.add_parser("voices", help="List voices")
    p_voices.add_argument("language_code", nargs="?", help="Filter, e.g. en-US")

    sub.add_parser("languages", help="List language codes")

    return parser.parse_args(argv)


def _load(args: argparse.Namespace) -> Settings:
    """Settings from file/env with the --backend override applied."""
    settings = load_settings(args.settings, missing_ok=args.settings is None)
    if args.backend:
        raw = dict(settings.raw)
        raw["backend"] = args.backend
        settings = Settings(raw=raw)
    return settings


def _emit(payload: Any, as_json: bool) -> None:
    if as_json:
        print(json.dumps(payload, ensure_ascii=False))
    elif isinstance(payload, dict):
        for k, v in payload.items():
            print(f"{k}: {v}")
    elif isinstance(payload, list):
        for item in payload:
            print(item)
    else:
        print(payload)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Returns:
        0 on success, 1 on pipeline errors, 2 on configuration errors.
    """
    args = _parse_args(argv)

    # Pure local computation, no settings or backends needed
    if args.command == "key":
        try:
            language_code = resolve_language_code(args.voice)
        except VaultError as e:
            _emit(e.to_dict(), args.json)
            return 1
        key = compute_key(args.voice, args.text)
        _emit({"key": key, "file_name": artifact_name(key), "language_code": language_code}, args.json)
        return 0

    from tts_vault.services.pipeline import SynthesisPipeline, SynthesisRequest

    try:
        settings = _load(args)
        config = settings.get_config()
        configure_logging(level=config.logging.level, force=True, settings_path=args.settings)
        pipeline = SynthesisPipeline.from_settings(settings)
    except (ConfigValidationError, FileNotFoundError) as e:
        _emit({"ok": False, "error": ErrorCode.CONFIG_ERROR, "message": str(e)}, args.json)
        return 2

    log = get_logger("tts-vault.cli")
    rid = str(uuid4())[:12]
    set_request_id(rid)

    try:
        if args.command == "synth":
            info(log, "synth_start", voice=args.voice, chars=len(args.text))
            result = pipeline.synthesize(
                SynthesisRequest(voice=args.voice, source_text=args.text, target_text=args.translated),
                request_id=rid,
            )
            _emit({
                "ok": True,
                "audioUrl": result.playback_url,
                "reused": result.reused,
                "record": result.record.to_dict(),
                "timings": {k: round(v, 4) for k, v in result.timings.items()},
            }, args.json)
        elif args.command == "lookup":
            _emit(pipeline.lookup(args.identifier).to_dict(), args.json)
        elif args.command == "voices":
            voices = pipeline.list_voices(args.language_code)
            if args.json:
                _emit({"voices": [v.to_dict() for v in voices]}, True)
            else:
                _emit([v.name for v in voices], False)
        elif args.command == "languages":
            languages = pipeline.list_languages()
            _emit({"languages": languages} if args.json else languages, args.json)
    except VaultError as e:
        payload = e.to_dict()
        payload["request_id"] = rid
        _emit(payload, args.json)
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
