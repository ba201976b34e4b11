"""
Mod session: the single owner of the active map, the backup map and the
mod list for one game client.

Every operation that changes which mods are enabled goes through here, so
the map pair and the mod list are never mutated from anywhere else.
"""

import logging
import shutil
from pathlib import Path
from typing import List, Optional, TYPE_CHECKING

from .engine import ActivationEngine
from .process import GameProcessDetector
from ..composite import CompositeMap
from ..errors import BackupMissing, UnresolvedModError
from ..mods.mod_list import load_mod_list, save_mod_list
from ..mods.models import ModEntry
from ..mods.resolver import load_declaration
from ..settings.paths import GamePaths
from ..settings.types import ConfigError

if TYPE_CHECKING:
    from ..settings import AppSettings


class ModSession:
    """Activation state for one game client directory.

    With `wait_for_launch` set, mod changes only touch the in-memory map;
    the map file is rebuilt when the game starts and restored to the clean
    backup when it exits.
    """

    def __init__(self, paths: GamePaths, wait_for_launch: bool = False):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.paths = paths
        self.wait_for_launch = wait_for_launch

        self.active_map = CompositeMap(paths.composite_mapper_path)
        self.backup_map = CompositeMap(paths.backup_composite_mapper_path)
        self.engine = ActivationEngine(self.active_map, self.backup_map)
        self.mods: List[ModEntry] = []
        self.game_running = False

    @classmethod
    def from_settings(cls, settings: "AppSettings") -> "ModSession":
        """Create a session for the configured game root.

        Raises:
            ConfigError: If no game root is configured
        """
        paths = settings.game_paths
        if paths is None:
            raise ConfigError("Game root not set")
        return cls(paths, wait_for_launch=settings.wait_for_launch)

    # === STARTUP ===

    def ensure_backup(self) -> bool:
        """Copy the live map to the backup path unless a backup already exists.

        Returns:
            True if a backup exists afterwards
        """
        backup = self.paths.backup_composite_mapper_path
        if backup.exists():
            return True

        live = self.paths.composite_mapper_path
        if not live.exists():
            self.logger.warning(f"{live.name} not found, cannot create backup")
            return False

        shutil.copy2(live, backup)
        self.logger.info(f"Created clean backup at {backup}")
        return True

    def open(self) -> None:
        """Load both maps and the mod list, then apply enabled mods.

        Raises:
            BackupMissing: If no backup exists and none can be created
            OSError: If a map file cannot be read
        """
        if not self.ensure_backup():
            raise BackupMissing(
                f"Backup map missing: {self.paths.backup_composite_mapper_path}"
            )

        self.backup_map.load()
        self.logger.info("Backup mapper loaded")
        self.active_map.load()
        self.logger.info("Active mapper loaded")

        self.load_mod_list()
        self.scan_mod_files()

        if self.wait_for_launch:
            self.logger.info("Ready, waiting for game launch")
            return

        self.logger.info("Applying enabled mods")
        self.apply_enabled_mods()
        self.commit()

    def load_mod_list(self) -> None:
        """Load the persisted mod list, creating an empty one if absent."""
        if self.paths.mod_list_path.exists():
            self.mods = load_mod_list(self.paths.mod_list_path)
        else:
            self.mods = []
            self.save_mod_list()

    def save_mod_list(self) -> None:
        save_mod_list(self.mods, self.paths.mod_list_path)

    def scan_mod_files(self) -> None:
        """Recover the declared redirects of every listed mod from its container."""
        self.logger.info("Scanning mod files...")
        for mod in self.mods:
            path = self.paths.mods_dir / mod.file
            if not path.exists():
                self.logger.warning(f"Mod file missing: {path}")
                continue

            try:
                declaration = load_declaration(path, self.active_map)
            except (OSError, UnresolvedModError) as e:
                self.logger.warning(f"Could not read mod '{mod.file}': {e}")
                continue

            if not declaration.mod_name:
                declaration.mod_name = mod.declaration.mod_name
            mod.declaration = declaration

    # === MOD LIST OPERATIONS ===

    def _find_mod(self, file_name: str) -> Optional[int]:
        for index, mod in enumerate(self.mods):
            if mod.file == file_name:
                return index
        return None

    def _apply_if_live(self) -> None:
        if not self.wait_for_launch:
            self.commit()

    def install_mod(self, source: Path) -> ModEntry:
        """Copy a mod container into the mods directory and enable it.

        Enabled mods declaring the same objects are disabled first. A mod
        with the same file name already in the list is replaced.

        Raises:
            OSError: If the file cannot be copied or read
            UnresolvedModError: If a raw container matches nothing in the map
        """
        source = Path(source)
        target = self.paths.mods_dir / source.name
        if source.resolve() != target.resolve():
            shutil.copy2(source, target)

        declaration = load_declaration(target, self.active_map)

        existing = self._find_mod(target.name)
        if existing is not None:
            self.remove_mod(existing)

        self.engine.disable_conflicts(self.mods, declaration)

        entry = ModEntry(file=target.name, enabled=True, declaration=declaration)
        self.mods.append(entry)
        self.engine.turn_on(declaration)

        self._apply_if_live()
        self.save_mod_list()
        self.logger.info(f"Installed '{entry.display_name}'")
        return entry

    def enable_mod(self, index: int) -> List[int]:
        """Enable a mod, disabling conflicting ones.

        Returns:
            Indices of mods that were force-disabled
        """
        disabled = self.engine.enable(self.mods, index)
        self.save_mod_list()
        self._apply_if_live()
        return disabled

    def disable_mod(self, index: int) -> None:
        """Disable a mod and revert its objects."""
        self.engine.disable(self.mods, index)
        self.save_mod_list()
        self._apply_if_live()

    def remove_mod(self, index: int) -> ModEntry:
        """Remove a mod from the list, reverting it first if enabled."""
        mod = self.mods[index]
        if mod.enabled:
            self.engine.disable(self.mods, index)
        del self.mods[index]

        self.save_mod_list()
        self._apply_if_live()
        self.logger.info(f"Removed '{mod.display_name}'")
        return mod

    def disable_all_mods(self) -> List[int]:
        """Disable every mod and restore the clean map.

        The reverted map is written before the restore, so the map file
        matches the saved mod list even when the backup is gone.

        Raises:
            BackupMissing: If the backup map file is gone
        """
        changed = self.engine.disable_all(self.mods)
        if not changed:
            self.logger.info("No mods were enabled")

        self.commit()
        self.save_mod_list()
        self.restore()
        return changed

    # === MAP PERSISTENCE ===

    def apply_enabled_mods(self) -> None:
        """Rebuild the active map from the backup and every enabled mod."""
        self.engine.apply_enabled_mods(self.mods)

    def commit(self) -> bool:
        """Save the active map if it has unsaved changes.

        Returns:
            True if the map was written
        """
        if not self.active_map.dirty:
            return False
        self.active_map.save()
        return True

    def save(self) -> None:
        """Save the active map unconditionally."""
        self.active_map.save()

    def restore(self) -> None:
        """Replace the active map with the clean backup, in memory and on disk.

        Raises:
            BackupMissing: If the backup map file does not exist; the active
                map file is left untouched
        """
        backup = self.paths.backup_composite_mapper_path
        if not backup.exists():
            raise BackupMissing(
                "Restore failed: missing backup file. "
                "Turn off all mods and restart the mod manager."
            )

        self.active_map.load(backup)
        self.active_map.save()
        self.logger.info(f"Restored composite map from {backup}")

    # === GAME PROCESS ===

    def on_game_state(self, running: bool) -> None:
        """React to the game starting or stopping.

        A launch rebuilds and saves the active map. An exit restores the
        clean map when `wait_for_launch` is set.
        """
        was_running = self.game_running
        self.game_running = running

        if running and not was_running:
            self.logger.info("Game launched, applying all enabled mods")
            self.apply_enabled_mods()
            self.active_map.save()
            enabled = sum(1 for mod in self.mods if mod.enabled)
            self.logger.info(f"Applied {enabled} mods")
        elif not running and was_running:
            self.logger.info("Game closed")
            if self.wait_for_launch:
                self.restore()
            else:
                self.commit()

    def poll(self, detector: GameProcessDetector) -> bool:
        """Check the game process once and react to any transition."""
        running = detector.is_running()
        self.on_game_state(running)
        return running
