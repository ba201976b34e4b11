"""
Exception types for tera-mod-manager.
"""


class ModManagerError(Exception):
    """Base class for all mod manager failures."""
    pass


class EntryNotFound(ModManagerError, KeyError):
    """Raised when a patch or removal targets an entry id absent from the map."""

    def __init__(self, entry_id: str):
        super().__init__(entry_id)
        self.entry_id = entry_id

    def __str__(self) -> str:
        return f"Composite entry not found: {self.entry_id}"


class BackupMissing(ModManagerError, FileNotFoundError):
    """Raised when the clean backup map is required but does not exist."""
    pass


class ContainerParseError(ModManagerError, ValueError):
    """Raised when a mod container cannot be parsed structurally."""
    pass


class UnresolvedModError(ModManagerError):
    """Raised when a raw mod cannot be matched to any game container by name."""
    pass
