"""
Activation engine: applying and reverting mods against the composite map.

The active map is always derivable as the backup map with the patches of
every enabled mod applied in list order. Per-package failures are logged
and skipped so one missing object never blocks the rest of a mod.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Set

from ..composite import CompositeMap
from ..errors import EntryNotFound
from ..mods.models import ModDeclaration, ModEntry


@dataclass
class ActivationReport:
    """Per-package outcome of turning a mod on or off."""

    patched: List[str] = field(default_factory=list)
    """Object paths redirected into the mod container."""

    reverted: List[str] = field(default_factory=list)
    """Object paths restored from the backup map."""

    removed: List[str] = field(default_factory=list)
    """Object paths whose entry had no backup original and was deleted."""

    missing: List[str] = field(default_factory=list)
    """Object paths that could not be resolved to a single entry."""


class ActivationEngine:
    """Turns mods on and off against an active map and its clean backup.

    The backup map is only ever read. Mod lists are passed in by the caller,
    which owns them; the engine updates their `enabled` flags when resolving
    conflicts.
    """

    def __init__(self, active_map: CompositeMap, backup_map: CompositeMap):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.active_map = active_map
        self.backup_map = backup_map

    # === SINGLE MOD ===

    def turn_on(self, declaration: ModDeclaration) -> ActivationReport:
        """Redirect every object the mod declares into its container."""
        report = ActivationReport()

        for redirect in declaration.redirects:
            path = redirect.object_path
            if not path:
                continue

            entry = self.active_map.find_by_incomplete_path(path)
            if entry is None:
                self.logger.warning(
                    f"Object '{path}' not found in composite map, skipping"
                )
                report.missing.append(path)
                continue

            try:
                self.active_map.apply_patch(
                    entry.entry_id,
                    declaration.container_name,
                    redirect.offset,
                    redirect.size,
                )
            except EntryNotFound as e:
                self.logger.warning(f"Failed to patch '{path}': {e}")
                report.missing.append(path)
                continue

            report.patched.append(path)

        self.logger.debug(
            f"Turned on '{declaration.container_name}': "
            f"{len(report.patched)} patched, {len(report.missing)} missing"
        )
        return report

    def turn_off(self, declaration: ModDeclaration, silent: bool = False) -> ActivationReport:
        """Revert every object the mod declares.

        Entries found in the backup map get their original location back.
        Entries absent from the backup were created by a mod and are removed
        from the active map. A path found in neither is logged unless
        `silent` is set, which is used when a mod is switched off to make
        room for a conflicting one.
        """
        report = ActivationReport()

        for redirect in declaration.redirects:
            path = redirect.object_path
            if not path:
                continue

            original = self.backup_map.find_by_incomplete_path(path)
            if original is not None:
                try:
                    self.active_map.apply_patch(
                        original.entry_id,
                        original.container_file,
                        original.offset,
                        original.size,
                    )
                except EntryNotFound as e:
                    self.logger.warning(f"Failed to revert '{path}': {e}")
                    report.missing.append(path)
                    continue
                report.reverted.append(path)
                continue

            active = self.active_map.find_by_incomplete_path(path)
            if active is not None:
                self.logger.info(f"Removing new object entry: {path}")
                self.active_map.remove_entry(active.entry_id)
                report.removed.append(path)
                continue

            if not silent:
                self.logger.warning(
                    f"Object '{path}' not found in active map or backup"
                )
            report.missing.append(path)

        return report

    # === MOD LIST ===

    @staticmethod
    def find_conflicts(
        mods: Sequence[ModEntry],
        declaration: ModDeclaration,
        exclude: Optional[int] = None,
    ) -> List[int]:
        """Indices of enabled mods declaring any object path the given mod declares."""
        wanted: Set[str] = {p for p in declaration.object_paths if p}
        conflicts: List[int] = []

        for index, mod in enumerate(mods):
            if index == exclude or not mod.enabled:
                continue
            if any(path in wanted for path in mod.declaration.object_paths):
                conflicts.append(index)

        return conflicts

    def disable_conflicts(
        self,
        mods: Sequence[ModEntry],
        declaration: ModDeclaration,
        exclude: Optional[int] = None,
    ) -> List[int]:
        """Force-disable every enabled mod overlapping `declaration`.

        Each conflicting mod is fully reverted before the next one is
        looked at.
        """
        conflicts = self.find_conflicts(mods, declaration, exclude)
        for index in conflicts:
            mod = mods[index]
            self.logger.info(
                f"Conflict detected: disabling '{mod.file}' "
                f"in favor of '{declaration.mod_name or declaration.container_name}'"
            )
            mod.enabled = False
            self.turn_off(mod.declaration, silent=True)
        return conflicts

    def enable(self, mods: Sequence[ModEntry], index: int) -> List[int]:
        """Enable one mod after disabling the mods it conflicts with.

        Returns:
            Indices of the mods that were force-disabled
        """
        target = mods[index]
        disabled = self.disable_conflicts(mods, target.declaration, exclude=index)

        target.enabled = True
        self.turn_on(target.declaration)
        self.logger.info(f"Enabled '{target.display_name}'")
        return disabled

    def disable(self, mods: Sequence[ModEntry], index: int) -> ActivationReport:
        """Disable one mod and revert its objects."""
        target = mods[index]
        target.enabled = False
        report = self.turn_off(target.declaration)
        self.logger.info(f"Disabled '{target.display_name}'")
        return report

    def disable_all(self, mods: Sequence[ModEntry]) -> List[int]:
        """Disable every enabled mod. Returns the indices that changed."""
        changed = [index for index, mod in enumerate(mods) if mod.enabled]
        for index in changed:
            self.disable(mods, index)
        return changed

    def apply_enabled_mods(self, mods: Sequence[ModEntry]) -> None:
        """Rebuild the active map from the backup and every enabled mod.

        Mods are applied in list order, so a later mod overwrites an earlier
        one declaring the same object.
        """
        self.active_map.reset_from(self.backup_map)

        enabled = [mod for mod in mods if mod.enabled]
        for mod in enabled:
            self.turn_on(mod.declaration)

        self.logger.info(f"Applied {len(enabled)} enabled mods")
