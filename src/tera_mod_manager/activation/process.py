"""
Detection of the running game client.
"""

import logging
from typing import Optional

import psutil

from ..settings.game import DEFAULT_PROCESS_NAME


class GameProcessDetector:
    """Polls the process list for the game executable."""

    def __init__(self, process_name: str = DEFAULT_PROCESS_NAME):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.process_name = process_name.lower()

    def is_running(self) -> bool:
        """Return True if a process with the configured name exists."""
        for proc in psutil.process_iter(["name"]):
            name: Optional[str] = proc.info.get("name")
            if name and name.lower() == self.process_name:
                self.logger.debug(f"Found game process {name} (pid {proc.pid})")
                return True
        return False
