import logging

import pydantic
import pytest
import structlog

from shared.config import Settings, get_settings
from shared.domain.system_settings import DEFAULT_TIMEZONE
from shared.logging_config import configure_logging


def test_defaults(monkeypatch):
    monkeypatch.delenv("DEFAULT_TIMEZONE", raising=False)
    settings = Settings(_env_file=None)

    assert settings.default_timezone == DEFAULT_TIMEZONE
    assert settings.redis_url == "redis://localhost:6379/0"
    assert settings.view_cache_prefix == "view:"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("REDIS_HOST", "cache.internal")
    monkeypatch.setenv("REDIS_DB", "3")
    monkeypatch.setenv("DEFAULT_TIMEZONE", "Europe/Berlin")

    settings = Settings(_env_file=None)

    assert settings.redis_url == "redis://cache.internal:6379/3"
    assert settings.default_timezone == "Europe/Berlin"


def test_default_timezone_is_validated():
    with pytest.raises(pydantic.ValidationError, match="Invalid timezone"):
        Settings(_env_file=None, default_timezone="Nowhere/Special")


def test_get_settings_is_cached():
    assert get_settings() is get_settings()


@pytest.mark.parametrize("log_format", ["json", "text"])
def test_configure_logging(log_format):
    configure_logging(Settings(_env_file=None, log_level="WARNING", log_format=log_format))

    assert logging.getLogger().level == logging.WARNING
    assert structlog.is_configured()
    structlog.get_logger("test").warning("Logging configured", log_format=log_format)
