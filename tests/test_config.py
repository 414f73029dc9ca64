"""
Tests for configuration loading and logging setup.
"""

import logging

import pytest
from pydantic import ValidationError

from api.config import APIConfig
from utilities.logger import get_logger, setup_logging


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("MONGO_URI", "WEATHER_API_KEY", "PORT", "LOG_LEVEL", "LOG_FORMAT", "REQUEST_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    settings = APIConfig(_env_file=None)
    assert settings.port == 5000
    assert settings.mongodb_collection == "books"
    assert settings.weather_api_url == "https://api.openweathermap.org/data/2.5/weather"
    assert settings.request_timeout == 10.0
    assert not settings.is_weather_configured()


def test_environment_overrides(clean_env):
    clean_env.setenv("MONGO_URI", "mongodb://db.example:27017/library")
    clean_env.setenv("WEATHER_API_KEY", "abc123")
    clean_env.setenv("PORT", "8080")
    clean_env.setenv("LOG_LEVEL", "debug")

    settings = APIConfig(_env_file=None)

    assert settings.mongo_uri == "mongodb://db.example:27017/library"
    assert settings.weather_api_key == "abc123"
    assert settings.is_weather_configured()
    assert settings.port == 8080
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize("field,value", [
    ("port", 0),
    ("port", 70000),
    ("request_timeout", 0),
    ("log_level", "VERBOSE"),
    ("log_format", "xml"),
])
def test_invalid_values(clean_env, field, value):
    with pytest.raises(ValidationError):
        APIConfig(_env_file=None, **{field: value})


def test_log_file_path(clean_env, tmp_path):
    assert APIConfig(_env_file=None).get_log_file_path() is None
    log_file = tmp_path / "api.log"
    assert APIConfig(_env_file=None, log_file=str(log_file)).get_log_file_path() == log_file


def test_setup_logging_writes_file(tmp_path):
    log_file = tmp_path / "logs" / "api.log"

    root_logger = logging.getLogger()
    handlers_before = list(root_logger.handlers)
    try:
        setup_logging(log_level="INFO", log_format="json", log_file=log_file)
        get_logger("test").warning("hello", book_id="abc")

        assert log_file.exists()
    finally:
        for handler in root_logger.handlers[:]:
            if handler not in handlers_before:
                root_logger.removeHandler(handler)
                handler.close()
