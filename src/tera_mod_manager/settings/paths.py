"""
Path-related settings for tera-mod-manager.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from PySide6.QtCore import QSettings

COOKED_PC_DIR = "CookedPC"
COMPOSITE_MAPPER_FILE = "CompositePackageMapper.dat"
BACKUP_COMPOSITE_MAPPER_FILE = "CompositePackageMapper.clean"
MOD_LIST_FILE = "ModList.mods"


@dataclass(frozen=True)
class GamePaths:
    """Files the mod manager reads and writes inside a game client directory."""

    root_dir: Path
    cooked_pc_dir: Path
    mods_dir: Path
    composite_mapper_path: Path
    backup_composite_mapper_path: Path
    mod_list_path: Path

    @classmethod
    def from_root(cls, root_dir: Path) -> "GamePaths":
        """Derive every path from the client root (the folder holding CookedPC)."""
        root_dir = Path(root_dir)
        cooked_pc = root_dir / COOKED_PC_DIR
        return cls(
            root_dir=root_dir,
            cooked_pc_dir=cooked_pc,
            mods_dir=cooked_pc,
            composite_mapper_path=cooked_pc / COMPOSITE_MAPPER_FILE,
            backup_composite_mapper_path=cooked_pc / BACKUP_COMPOSITE_MAPPER_FILE,
            mod_list_path=cooked_pc / MOD_LIST_FILE,
        )


class PathSettings:
    """Manages path-related settings."""

    def __init__(self, settings: "QSettings"):
        self.settings = settings

    def _get_str(self, key: str, default: str = "") -> str:
        """Type-safe string retrieval from settings."""
        value = self.settings.value(key, default)
        return str(value) if value is not None else default

    @property
    def root_dir(self) -> Optional[Path]:
        """Get game client root directory."""
        path_str = self._get_str("paths/root", "")
        return Path(path_str) if path_str else None

    @root_dir.setter
    def root_dir(self, value: Optional[Path]) -> None:
        """Set game client root directory."""
        self.settings.setValue("paths/root", str(value) if value else "")
        self.settings.sync()

    @property
    def game_paths(self) -> Optional[GamePaths]:
        """Get derived game file paths (None while no root is set)."""
        if self.root_dir:
            return GamePaths.from_root(self.root_dir)
        return None
