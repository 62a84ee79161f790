from __future__ import annotations

from guestpost.core.config import get_settings


def test_defaults_without_environment(monkeypatch):
    monkeypatch.delenv("PORT", raising=False)
    settings = get_settings()
    assert settings.storage_backend == "json"
    assert settings.min_password_length == 6
    assert settings.password_hashing is False
    assert settings.port == 8000


def test_numbers_and_flags_from_environment(monkeypatch):
    monkeypatch.setenv("MIN_PASSWORD_LENGTH", "not-a-number")
    monkeypatch.setenv("PORT", " 9001 ")
    monkeypatch.setenv("PASSWORD_HASHING", "Yes")
    monkeypatch.setenv("STORAGE_BACKEND", " SQL ")

    settings = get_settings()
    assert settings.min_password_length == 6
    assert settings.port == 9001
    assert settings.password_hashing is True
    assert settings.storage_backend == "sql"
