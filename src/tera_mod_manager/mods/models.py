"""
Data models for mods and their declared redirections.

A mod is a container file plus a list of object paths it wants the composite
map to point at that container. Redirects read from a packed container carry
an exact location; redirects guessed from the file name do not.
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class PackageLocation:
    """Byte range of one object inside a mod container."""

    offset: int
    size: int


@dataclass
class ObjectRedirect:
    """One object path a mod redirects into its container.

    `location` is None for an unresolved redirect, produced when the
    container could not be parsed and the target was matched by file name.
    Unresolved redirects are written to the map as offset 0 and size 0.
    """

    object_path: str
    location: Optional[PackageLocation] = None
    file_version: int = 0
    licensee_version: int = 0

    @classmethod
    def resolved(
        cls,
        object_path: str,
        offset: int,
        size: int,
        file_version: int = 0,
        licensee_version: int = 0,
    ) -> "ObjectRedirect":
        return cls(
            object_path=object_path,
            location=PackageLocation(offset, size),
            file_version=file_version,
            licensee_version=licensee_version,
        )

    @classmethod
    def unresolved(cls, object_path: str) -> "ObjectRedirect":
        return cls(object_path=object_path)

    @property
    def is_resolved(self) -> bool:
        return self.location is not None

    @property
    def offset(self) -> int:
        return self.location.offset if self.location else 0

    @property
    def size(self) -> int:
        return self.location.size if self.location else 0


@dataclass
class ModDeclaration:
    """Everything the activation engine needs to know about a mod."""

    container_name: str = ""
    redirects: List[ObjectRedirect] = field(default_factory=list)
    mod_name: str = ""
    mod_author: str = ""
    region_lock: bool = False
    mod_file_version: int = 0

    @property
    def is_raw(self) -> bool:
        """True when any redirect was guessed rather than read from the container."""
        return any(not r.is_resolved for r in self.redirects)

    @property
    def object_paths(self) -> List[str]:
        return [r.object_path for r in self.redirects]


@dataclass
class ModEntry:
    """A mod in the user's mod list."""

    file: str
    enabled: bool = False
    declaration: ModDeclaration = field(default_factory=ModDeclaration)

    @property
    def display_name(self) -> str:
        """Mod name from the container, or the file name when it has none."""
        return self.declaration.mod_name or self.file
