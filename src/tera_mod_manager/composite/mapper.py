"""
In-memory composite package map.

Owns the entry collection and its round trip through the cipher and the text
codec. Two instances normally exist per session: the active map the game
reads and the clean backup used as ground truth when reverting mods.
"""

import logging
from pathlib import Path
from typing import Dict, Iterator, List, Optional

from . import cipher, codec
from .matcher import incomplete_paths_equal
from .models import MapEntry, MatchResult
from ..errors import EntryNotFound
from ..utils.fileio import atomic_write_bytes


class CompositeMap:
    """Ordered mapping of entry id to `MapEntry` with dirty tracking."""

    def __init__(self, source_path: Optional[Path] = None):
        """Create an empty map, optionally remembering where it came from.

        Args:
            source_path: Default path for `load()` and `save()`.
        """
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.source_path = Path(source_path) if source_path else None
        self.entries: Dict[str, MapEntry] = {}
        self.dirty = False
        self.truncated = False
        self.source_size = 0

    @classmethod
    def from_file(cls, path: Path) -> "CompositeMap":
        """Load a map from an encrypted file.

        Raises:
            OSError: If the file cannot be read
        """
        mapper = cls(path)
        mapper.load()
        return mapper

    @classmethod
    def from_bytes(cls, data: bytes) -> "CompositeMap":
        """Build a map from encrypted bytes."""
        mapper = cls()
        mapper._populate(data)
        return mapper

    # === LOAD / SAVE ===

    def _resolve_path(self, path: Optional[Path]) -> Path:
        target = Path(path) if path else self.source_path
        if target is None:
            raise ValueError("No path given and map has no source path")
        return target

    def _populate(self, encrypted: bytes) -> None:
        plaintext = cipher.decrypt_text(encrypted)
        result = codec.parse(plaintext)

        self.entries = {entry.entry_id: entry for entry in result.entries}
        self.truncated = result.truncated
        self.source_size = len(encrypted)
        self.dirty = False

    def load(self, path: Optional[Path] = None) -> None:
        """Replace the current entries with the content of an encrypted map file.

        Loading from another path keeps `source_path`, so a map refilled from
        the backup still saves to its own file.

        Raises:
            OSError: If the file cannot be read
        """
        target = self._resolve_path(path)
        self._populate(target.read_bytes())
        if self.source_path is None:
            self.source_path = target
        self.logger.info(f"Loaded {len(self.entries)} entries from {target}")

    def to_plaintext(self) -> str:
        """Serialize the current entries as map text."""
        return codec.serialize(self.entries.values())

    def to_bytes(self) -> bytes:
        """Serialize and encrypt the current entries."""
        return cipher.encrypt(self.to_plaintext().encode("utf-8"))

    def save(self, path: Optional[Path] = None) -> None:
        """Write the map to disk through a temporary file and clear `dirty`.

        Raises:
            OSError: If the file cannot be written; the target keeps its old content
        """
        target = self._resolve_path(path)
        atomic_write_bytes(target, self.to_bytes())
        self.dirty = False
        self.logger.info(f"Saved {len(self.entries)} entries to {target}")

    # === LOOKUP ===

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, entry_id: object) -> bool:
        return entry_id in self.entries

    def __iter__(self) -> Iterator[MapEntry]:
        return iter(self.entries.values())

    def get_entry(self, entry_id: str) -> Optional[MapEntry]:
        """Return the entry with the given id, if present."""
        return self.entries.get(entry_id)

    def match_incomplete_path(self, query: str) -> MatchResult:
        """Find every entry whose object path fuzzily equals `query`."""
        candidates = [
            entry
            for entry in self.entries.values()
            if incomplete_paths_equal(entry.object_path, query)
        ]
        return MatchResult.from_candidates(candidates)

    def find_by_incomplete_path(self, query: str) -> Optional[MapEntry]:
        """Return the single entry matching `query`.

        Zero and several matches both return None; an ambiguous path is never
        resolved to an arbitrary candidate.
        """
        return self.match_incomplete_path(query).entry

    def container_names(self) -> List[str]:
        """Distinct non-empty container names in first-seen order."""
        names: Dict[str, None] = {}
        for entry in self.entries.values():
            if entry.container_file:
                names.setdefault(entry.container_file, None)
        return list(names)

    # === MUTATION ===

    def apply_patch(
        self, entry_id: str, new_container: str, new_offset: int, new_size: int
    ) -> MapEntry:
        """Point an entry at a new container location.

        Raises:
            EntryNotFound: If `entry_id` is not in the map
        """
        entry = self.entries.get(entry_id)
        if entry is None:
            raise EntryNotFound(entry_id)

        entry.container_file = new_container
        entry.offset = new_offset
        entry.size = new_size
        self.dirty = True
        return entry

    def remove_entry(self, entry_id: str) -> bool:
        """Delete an entry. Returns True if something was removed."""
        if self.entries.pop(entry_id, None) is None:
            return False
        self.dirty = True
        return True

    def reset_from(self, other: "CompositeMap") -> None:
        """Replace all entries with independent copies of another map's entries."""
        self.entries = {
            entry_id: entry.copy() for entry_id, entry in other.entries.items()
        }
        if self.entries:
            self.dirty = True
