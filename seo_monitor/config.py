"""Configuration loading: ``config/settings.yaml`` plus ``.env`` overrides."""

import copy
import logging
import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config/settings.yaml"
DEFAULT_ENV_PATH = ".env"

DEFAULTS: dict[str, Any] = {
    "app": {
        "name": "SEO Monitor",
        "log_level": "INFO",
    },
    "database": {
        "url": None,
        "echo": False,
    },
    "auth": {
        "min_password_length": 6,
    },
    "wizard": {
        "keyword_slots": 3,
        "competitor_slots": 3,
        "default_location": "United States",
        "default_device": "desktop",
    },
}


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(
    config_path: str = DEFAULT_CONFIG_PATH,
    env_path: str = DEFAULT_ENV_PATH,
) -> dict[str, Any]:
    """Load the YAML configuration merged over built-in defaults.

    The ``.env`` file (if present) is loaded into the process environment
    first, and ``DATABASE_URL`` then takes precedence over ``database.url``.
    """
    env_file = Path(env_path)
    if env_file.exists():
        load_dotenv(env_file)
        logger.info("Loaded environment from %s", env_path)

    config_file = Path(config_path)
    if config_file.exists():
        with open(config_file, "r", encoding="utf-8") as fh:
            loaded = yaml.safe_load(fh) or {}
        logger.info("Configuration loaded from %s", config_path)
    else:
        logger.warning("Config file not found: %s, using defaults.", config_path)
        loaded = {}

    config = _merge(DEFAULTS, loaded)
    env_url = os.getenv("DATABASE_URL")
    if env_url:
        config["database"]["url"] = env_url
    return config
