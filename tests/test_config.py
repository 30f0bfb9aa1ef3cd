"""Tests for crssnt.config."""

import pytest

from crssnt.config import load_config

CONFIG_VARS = (
    "ITEM_LIMIT", "CHAR_LIMIT", "PREVIEW_ITEM_LIMIT", "PREVIEW_CHAR_LIMIT",
    "MAX_SOURCES", "MAX_SHEET_ROWS", "FETCH_TIMEOUT_SECONDS",
    "BASE_URL", "LOG_LEVEL", "LOG_FORMAT",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Remove all config-related env vars before each test."""
    for key in CONFIG_VARS:
        monkeypatch.delenv(key, raising=False)
    # Prevent .env file from re-setting variables during tests
    monkeypatch.setattr("crssnt.config.load_dotenv", lambda *a, **kw: None)


def test_defaults():
    """Every variable is optional and has a default."""
    config = load_config()

    assert config.item_limit == 500
    assert config.char_limit == 5000
    assert config.preview_item_limit == 25
    assert config.preview_char_limit == 500
    assert config.max_sources == 10
    assert config.max_sheet_rows == 2000
    assert config.fetch_timeout_seconds == 30
    assert config.base_url == "https://crssnt.com"
    assert config.log_level == "INFO"
    assert config.log_format == "text"


def test_overrides(monkeypatch):
    monkeypatch.setenv("ITEM_LIMIT", "50")
    monkeypatch.setenv("MAX_SOURCES", "3")
    monkeypatch.setenv("BASE_URL", "http://localhost:8080")
    monkeypatch.setenv("LOG_FORMAT", "json")

    config = load_config()

    assert config.item_limit == 50
    assert config.max_sources == 3
    assert config.base_url == "http://localhost:8080"
    assert config.log_format == "json"


def test_blank_value_uses_default(monkeypatch):
    monkeypatch.setenv("CHAR_LIMIT", "  ")
    assert load_config().char_limit == 5000


def test_invalid_integers_listed(monkeypatch):
    """Error message includes every invalid variable name."""
    monkeypatch.setenv("ITEM_LIMIT", "0")
    monkeypatch.setenv("CHAR_LIMIT", "lots")
    monkeypatch.setenv("MAX_SOURCES", "-2")
    with pytest.raises(ValueError, match="must be positive integers") as exc_info:
        load_config()
    msg = str(exc_info.value)
    assert "ITEM_LIMIT" in msg
    assert "CHAR_LIMIT" in msg
    assert "MAX_SOURCES" in msg


def test_config_is_frozen():
    """Config is immutable after creation."""
    config = load_config()

    with pytest.raises(AttributeError):
        config.item_limit = 1
