"""Configuration loading and validation."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


@dataclass(frozen=True)
class Config:
    """Application configuration. All values sourced from environment variables."""

    # Limits
    item_limit: int = 500
    char_limit: int = 5000
    preview_item_limit: int = 25
    preview_char_limit: int = 500

    # Sources
    max_sources: int = 10
    max_sheet_rows: int = 2000
    fetch_timeout_seconds: int = 30
    base_url: str = "https://crssnt.com"

    # Application
    log_level: str = "INFO"
    log_format: str = "text"


_INT_VARS = {
    "item_limit": ("ITEM_LIMIT", 500),
    "char_limit": ("CHAR_LIMIT", 5000),
    "preview_item_limit": ("PREVIEW_ITEM_LIMIT", 25),
    "preview_char_limit": ("PREVIEW_CHAR_LIMIT", 500),
    "max_sources": ("MAX_SOURCES", 10),
    "max_sheet_rows": ("MAX_SHEET_ROWS", 2000),
    "fetch_timeout_seconds": ("FETCH_TIMEOUT_SECONDS", 30),
}


def load_config(env_path: str | Path | None = None) -> Config:
    """Load configuration from environment variables.

    Loads a .env file if present (for local development). Every variable is
    optional. Raises ValueError listing any integer setting that is not a
    positive integer.
    """
    load_dotenv(dotenv_path=env_path)

    values: dict[str, int] = {}
    invalid: list[str] = []
    for field_name, (var, default) in _INT_VARS.items():
        raw = os.environ.get(var)
        if raw is None or not raw.strip():
            values[field_name] = default
            continue
        try:
            value = int(raw)
        except ValueError:
            invalid.append(var)
            continue
        if value < 1:
            invalid.append(var)
            continue
        values[field_name] = value

    if invalid:
        raise ValueError(
            f"Environment variables must be positive integers: {', '.join(invalid)}"
        )

    return Config(
        **values,
        base_url=os.environ.get("BASE_URL", "https://crssnt.com"),
        log_level=os.environ.get("LOG_LEVEL", "INFO"),
        log_format=os.environ.get("LOG_FORMAT", "text"),
    )
