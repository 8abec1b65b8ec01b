"""BF2 Migrator - Configuration Package

JSON configuration file validated by pydantic models.
"""

from .models import (
    MigratorConfig,
    QuiescenceSettings,
    OpenSpySettings,
    InstallSettings,
    LoggingSettings,
    validate_config,
)
from .io import get_config_path, load_config, save_config

__all__ = [
    'MigratorConfig',
    'QuiescenceSettings',
    'OpenSpySettings',
    'InstallSettings',
    'LoggingSettings',
    'validate_config',
    'get_config_path',
    'load_config',
    'save_config',
]
