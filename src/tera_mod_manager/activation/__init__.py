"""
Mod activation: the engine applying mods to the composite map, the session
owning the map pair, and game process detection.
"""

from .engine import ActivationEngine, ActivationReport
from .process import GameProcessDetector
from .session import ModSession

__all__ = [
    "ActivationEngine",
    "ActivationReport",
    "GameProcessDetector",
    "ModSession",
]
