"""
Settings validation system for tera-mod-manager.
"""

import logging
from typing import List, TYPE_CHECKING

from .types import ValidationResult

if TYPE_CHECKING:
    from .core import AppSettings

logger = logging.getLogger(__name__)


class SettingsValidator:
    """Validates configuration settings."""

    def __init__(self, settings: "AppSettings"):
        self.settings = settings

    def validate(self) -> ValidationResult:
        """Validate current configuration."""
        errors: List[str] = []
        warnings: List[str] = []

        root_dir = self.settings.root_dir
        if root_dir:
            paths = self.settings.game_paths
            if not root_dir.exists():
                errors.append(f"Game root does not exist: {root_dir}")
            elif paths and not paths.cooked_pc_dir.is_dir():
                errors.append(f"Game root has no CookedPC directory: {root_dir}")
            elif paths and not paths.composite_mapper_path.exists():
                warnings.append(
                    f"{paths.composite_mapper_path.name} not found in the selected directory"
                )
        else:
            warnings.append("Game root not set")

        if not self.settings.process_name.lower().endswith(".exe"):
            warnings.append(
                f"Game process name does not look like an executable: {self.settings.process_name}"
            )

        for message in errors:
            logger.debug(f"Validation error: {message}")

        return ValidationResult(
            is_valid=len(errors) == 0, errors=errors, warnings=warnings
        )
