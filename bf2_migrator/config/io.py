"""Config I/O utilities."""

from __future__ import annotations

import json
import os
import logging
from typing import Optional

import pydantic

from ..exceptions import ConfigurationError, ValidationError
from .models import MigratorConfig, validate_config

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "BF2_MIGRATOR_CONFIG"


def get_config_path() -> str:
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return override
    base_dir = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
    return os.path.join(base_dir, "config.json")


def load_config(config_path: Optional[str] = None) -> MigratorConfig:
    if config_path is None:
        config_path = get_config_path()
    if not os.path.exists(config_path):
        logger.debug("No config file at %s, using defaults", config_path)
        return MigratorConfig()

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in configuration file: {e}", file_path=config_path)
    except OSError as e:
        raise ConfigurationError(f"Failed to read configuration file: {e}", file_path=config_path)

    if not isinstance(data, dict):
        raise ValidationError("Configuration root must be an object", expected_type="object")

    try:
        config = validate_config(data)
    except pydantic.ValidationError as e:
        raise ValidationError(
            f"Invalid configuration in {config_path}: {e.error_count()} error(s)",
            details={"errors": [err["msg"] for err in e.errors()]},
        )

    logger.info("Configuration loaded from %s", config_path)
    return config


def save_config(config: MigratorConfig, config_path: Optional[str] = None) -> str:
    if config_path is None:
        config_path = get_config_path()
    try:
        os.makedirs(os.path.dirname(os.path.abspath(config_path)), exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(config.model_dump(), f, indent=2)
    except OSError as e:
        raise ConfigurationError(f"Failed to save configuration: {e}", file_path=config_path)

    logger.info("Configuration saved to %s", config_path)
    return config_path
