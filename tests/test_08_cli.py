import json

import pytest

from tts_vault import cli

VOICE = "en-US-Wavenet-A"
TEXT = "Hello, world!"
HELLO_KEY = "905299e95c365d6bcfe81de24c5d02a9ccb4e9c1bcf259df53691dde88a9def0"


def _last_json(out: str) -> dict:
    # Console log lines share stdout with the command output
    lines = [line for line in out.splitlines() if line.startswith("{")]
    assert lines, out
    return json.loads(lines[-1])


@pytest.fixture(autouse=True)
def memory_env(monkeypatch, tmp_path):
    monkeypatch.setenv("TTS_VAULT_SETTINGS", str(tmp_path / "missing.yaml"))
    monkeypatch.delenv("TTS_VAULT_BACKEND", raising=False)
    monkeypatch.delenv("FIREBASE_STORAGE_BUCKET", raising=False)


def test_cli_key(capsys):
    code = cli.main(["--json", "key", VOICE, TEXT])
    assert code == 0
    payload = _last_json(capsys.readouterr().out)
    assert payload["key"] == HELLO_KEY
    assert payload["file_name"] == f"{HELLO_KEY}.mp3"
    assert payload["language_code"] == "en-US"


def test_cli_key_plain_output(capsys):
    assert cli.main(["key", VOICE, TEXT]) == 0
    assert f"key: {HELLO_KEY}" in capsys.readouterr().out


def test_cli_key_invalid_voice(capsys):
    code = cli.main(["--json", "key", "en-US", TEXT])
    assert code == 1
    assert _last_json(capsys.readouterr().out)["error"] == "INVALID_VOICE"


def test_cli_synth_memory(capsys):
    code = cli.main(["--backend", "memory", "--json", "synth", VOICE, TEXT])
    assert code == 0
    payload = _last_json(capsys.readouterr().out)
    assert payload["ok"] is True
    assert payload["reused"] is False
    assert payload["record"]["key"] == HELLO_KEY
    assert payload["audioUrl"].endswith(f"/audio/{HELLO_KEY}.mp3")
    assert set(payload["timings"]) >= {"synth", "upload", "catalog_put"}


def test_cli_synth_translated(capsys):
    code = cli.main([
        "--backend", "memory", "--json",
        "synth", "de-DE-Neural2-B", "Good morning", "--translated", "Guten Morgen",
    ])
    assert code == 0
    assert _last_json(capsys.readouterr().out)["record"]["textTranslated"] == "Guten Morgen"


def test_cli_synth_invalid_input(capsys):
    code = cli.main(["--backend", "memory", "--json", "synth", VOICE, ""])
    assert code == 1
    payload = _last_json(capsys.readouterr().out)
    assert payload["error"] == "INVALID_INPUT"
    assert "request_id" in payload


def test_cli_lookup_missing(capsys):
    code = cli.main(["--backend", "memory", "--json", "lookup", f"{HELLO_KEY}.mp3"])
    assert code == 1
    assert _last_json(capsys.readouterr().out)["error"] == "NOT_FOUND"


def test_cli_voices(capsys):
    code = cli.main(["--backend", "memory", "--json", "voices", "en-US"])
    assert code == 0
    names = [v["name"] for v in _last_json(capsys.readouterr().out)["voices"]]
    assert names == ["en-US-Neural2-A", "en-US-Wavenet-A"]


def test_cli_languages(capsys):
    code = cli.main(["--backend", "memory", "--json", "languages"])
    assert code == 0
    languages = _last_json(capsys.readouterr().out)["languages"]
    assert languages == sorted(languages)
    assert "ja-JP" in languages


def test_cli_google_without_bucket_is_config_error(capsys):
    code = cli.main(["--backend", "google", "--json", "languages"])
    assert code == 2
    assert _last_json(capsys.readouterr().out)["error"] == "CONFIG_ERROR"


def test_cli_missing_settings_file(capsys, tmp_path):
    code = cli.main(["--settings", str(tmp_path / "nope.yaml"), "--json", "languages"])
    assert code == 2
    assert _last_json(capsys.readouterr().out)["error"] == "CONFIG_ERROR"


def test_cli_log_level_from_settings_file(capsys, tmp_path, monkeypatch):
    from tts_vault.core.logging import LogLevel, get_level, set_level

    monkeypatch.delenv("TTS_VAULT_LOG_LEVEL", raising=False)
    path = tmp_path / "other.yaml"
    path.write_text("backend: memory\nlogging:\n  level: 3\n", encoding="utf-8")
    previous = get_level()
    try:
        code = cli.main(["--settings", str(path), "--json", "languages"])
        assert code == 0
        assert get_level() == LogLevel.VERBOSE
    finally:
        set_level(previous)
