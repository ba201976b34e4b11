"""
tera-mod-manager: mod activation for TERA's composite package map

Redirects composite map entries into mod containers, resolves conflicts
between mods and keeps a clean backup of the original map.
"""

__version__ = "0.1.0"
__author__ = "tera-mod-manager Contributors"

# Core service imports
from .activation import ActivationEngine, ActivationReport, GameProcessDetector, ModSession
from .composite import CompositeMap
from .utils.logging_config import setup_logging

# Main data models
from .composite.models import MapEntry, MatchKind, MatchResult, ParseResult
from .mods.models import ModDeclaration, ModEntry, ObjectRedirect, PackageLocation

# Errors
from .errors import (
    ModManagerError, EntryNotFound, BackupMissing,
    ContainerParseError, UnresolvedModError
)

__all__ = [
    # Services
    'ModSession',
    'ActivationEngine',
    'ActivationReport',
    'CompositeMap',
    'GameProcessDetector',

    # Logging
    'setup_logging',

    # Data models
    'MapEntry',
    'MatchKind',
    'MatchResult',
    'ParseResult',
    'ModDeclaration',
    'ModEntry',
    'ObjectRedirect',
    'PackageLocation',

    # Errors
    'ModManagerError',
    'EntryNotFound',
    'BackupMissing',
    'ContainerParseError',
    'UnresolvedModError',
]
