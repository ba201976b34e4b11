"""
Settings package for tera-mod-manager.

This package provides type-safe configuration management using Qt's
QSettings for cross-platform storage.

Usage:
    from tera_mod_manager.settings import AppSettings, ValidationResult

    settings = AppSettings()
    result = settings.validate()
"""

from .core import AppSettings
from .types import ConfigVersion, ConfigError, ValidationResult
from .paths import GamePaths, PathSettings
from .game import GameSettings
from .logging import LoggingSettings

__all__ = [
    "AppSettings",
    "ConfigVersion",
    "ConfigError",
    "ValidationResult",
    "GamePaths",
    "PathSettings",
    "GameSettings",
    "LoggingSettings",
]
