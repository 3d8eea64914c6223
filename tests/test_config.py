"""Tests for Settings."""

from app.config import Settings


def test_defaults(monkeypatch):
    for name in ("PORT", "LOG_LEVEL", "DATABASE_URL", "ENVIRONMENT"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)

    assert settings.port == 3018
    assert settings.log_level == "INFO"
    assert settings.max_body_size == 10 * 1024 * 1024
    assert settings.database_url.startswith("postgresql+asyncpg://")
    assert settings.database_is_sqlite is False


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///./categories.db")

    settings = Settings(_env_file=None)

    assert settings.port == 8080
    assert settings.log_level == "DEBUG"
    assert settings.database_is_sqlite is True
