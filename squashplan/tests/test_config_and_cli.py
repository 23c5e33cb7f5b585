"""
Tests for settings loading, token helpers and the schedule printing CLI.
"""
from __future__ import annotations

from pathlib import Path

import pytest

import sys
sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

from squashplan.auth import create_access_token, decode_token, hash_password, verify_password
from squashplan.config import DEFAULT_CORS_ORIGINS, Settings, load_settings
from squashplan.run_schedule import main, run


def test_load_settings_defaults():
    settings = load_settings({})
    assert settings.db_path.name == "squashplan.db"
    assert settings.max_courts == 8
    assert settings.log_level == "INFO"
    assert settings.cors_origins == DEFAULT_CORS_ORIGINS


def test_load_settings_from_env(tmp_path):
    settings = load_settings({
        "SQUASHPLAN_DB_PATH": str(tmp_path / "x.db"),
        "JWT_SECRET_KEY": "s3cret",
        "SQUASHPLAN_TOKEN_EXPIRE_MINUTES": "15",
        "SQUASHPLAN_MAX_COURTS": "3",
        "SQUASHPLAN_LOG_LEVEL": "debug",
        "SQUASHPLAN_CORS_ORIGINS": "https://a.example, https://b.example,",
    })
    assert settings.db_path == tmp_path / "x.db"
    assert settings.jwt_secret_key == "s3cret"
    assert settings.access_token_expire_minutes == 15
    assert settings.max_courts == 3
    assert settings.log_level == "DEBUG"
    assert settings.cors_origins == ("https://a.example", "https://b.example")


def test_load_settings_rejects_zero_courts():
    with pytest.raises(ValueError):
        load_settings({"SQUASHPLAN_MAX_COURTS": "0"})


def test_token_round_trip_and_secret_mismatch(tmp_path):
    settings = Settings(db_path=tmp_path / "db", jwt_secret_key="one")
    token = create_access_token("user-1", settings)
    assert decode_token(token, settings) == "user-1"
    assert decode_token(token, Settings(db_path=tmp_path / "db", jwt_secret_key="two")) is None
    assert decode_token("garbage", settings) is None


def test_password_hashing():
    hashed = hash_password("secret123")
    assert hashed != "secret123"
    assert verify_password("secret123", hashed)
    assert not verify_password("nope", hashed)
    assert not verify_password("secret123", "")


def test_cli_prints_rounds_and_byes(capsys):
    main(["--courts", "2", "Anna", "Ben", "Carla"])
    out = capsys.readouterr().out
    assert out.count("Round ") == 3
    assert "Court 2: Ben vs Carla" in out
    assert "Sits out: Anna" in out


def test_cli_too_few_players(capsys):
    assert run(["Anna"]) == []
    assert "at least 2 players" in capsys.readouterr().out


def test_cli_duplicate_names_exit():
    with pytest.raises(SystemExit, match="Duplicate"):
        run(["Anna", "anna", "Ben"])


def test_cli_zero_courts_exit():
    with pytest.raises(SystemExit, match="court_count"):
        run(["Anna", "Ben"], courts=0)
