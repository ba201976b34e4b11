"""
Game-launch related settings for tera-mod-manager.
"""

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from PySide6.QtCore import QSettings

logger = logging.getLogger(__name__)

DEFAULT_PROCESS_NAME = "TERA.exe"


class GameSettings:
    """Manages settings controlling when mods are written for the game."""

    def __init__(self, settings: "QSettings"):
        self.settings = settings

    def _get_bool(self, key: str, default: bool = False) -> bool:
        """Type-safe boolean retrieval from settings."""
        value = self.settings.value(key, default)
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.lower() in ("true", "1", "yes")
        return bool(value) if value is not None else default

    @property
    def wait_for_launch(self) -> bool:
        """Whether map changes are deferred until the game starts."""
        return self._get_bool("game/wait_for_launch", False)

    @wait_for_launch.setter
    def wait_for_launch(self, value: bool) -> None:
        """Set whether map changes are deferred until the game starts."""
        self.settings.setValue("game/wait_for_launch", value)
        self.settings.sync()

    @property
    def process_name(self) -> str:
        """Get executable name used to detect the running game."""
        value = self.settings.value("game/process_name", DEFAULT_PROCESS_NAME)
        return str(value) if value else DEFAULT_PROCESS_NAME

    @process_name.setter
    def process_name(self, value: str) -> None:
        """Set executable name used to detect the running game."""
        if value.strip():
            self.settings.setValue("game/process_name", value.strip())
            self.settings.sync()
        else:
            logger.warning(
                f"Invalid process name: {value!r}, keeping current: {self.process_name}"
            )

