"""Tests for settings loading."""

import pytest

from moneybox.config import DEFAULT_TIMEZONE, DEFAULT_USER, load_settings, resolve_timezone
from moneybox.domain.errors import ValidationError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in ("MONEYBOX_USER", "MONEYBOX_TIMEZONE", "MONEYBOX_DB_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("MONEYBOX_DB_PATH", str(tmp_path / "money.db"))


def test_defaults(tmp_path):
    settings = load_settings()
    assert settings.database_path == str(tmp_path / "money.db")
    assert settings.user_id == DEFAULT_USER
    assert settings.timezone == DEFAULT_TIMEZONE
    assert settings.db_timeout == 10.0


def test_environment(monkeypatch):
    monkeypatch.setenv("MONEYBOX_USER", "ana")
    monkeypatch.setenv("MONEYBOX_TIMEZONE", "UTC")
    monkeypatch.setenv("MONEYBOX_DB_TIMEOUT", "2.5")

    settings = load_settings()
    assert settings.user_id == "ana"
    assert settings.timezone == "UTC"
    assert settings.db_timeout == 2.5


def test_overrides_beat_environment(monkeypatch):
    monkeypatch.setenv("MONEYBOX_USER", "ana")
    settings = load_settings(user_id="bia", database_path="/tmp/other.db")
    assert settings.user_id == "bia"
    assert settings.database_path == "/tmp/other.db"


def test_unknown_timezone():
    with pytest.raises(ValidationError):
        load_settings(timezone="Mars/Olympus_Mons")
    with pytest.raises(ValidationError):
        resolve_timezone("")


def test_invalid_timeout(monkeypatch):
    monkeypatch.setenv("MONEYBOX_DB_TIMEOUT", "soon")
    with pytest.raises(ValidationError):
        load_settings()
