"""
Data models for the composite package map.

Plain dataclasses with no file-system logic; loading and saving live in
`mapper`, text handling in `codec`.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


@dataclass
class MapEntry:
    """One redirection record of the composite map.

    `entry_id` is unique across the map and is what patches and removals key
    on. `object_path` may repeat or differ cosmetically between entries.
    """

    container_file: str
    object_path: str
    entry_id: str
    offset: int = 0
    size: int = 0

    def copy(self) -> "MapEntry":
        """Return an independent copy of this entry."""
        return MapEntry(
            container_file=self.container_file,
            object_path=self.object_path,
            entry_id=self.entry_id,
            offset=self.offset,
            size=self.size,
        )


@dataclass
class ParseResult:
    """Entries recovered from map text.

    `truncated` is True when the text ended before a block was closed or
    carried a trailing fragment; the entries then cover only what could be
    read.
    """

    entries: List[MapEntry] = field(default_factory=list)
    truncated: bool = False


class MatchKind(Enum):
    """Outcome of resolving an incomplete object path."""

    UNIQUE = "unique"
    NONE = "none"
    AMBIGUOUS = "ambiguous"


@dataclass
class MatchResult:
    """Result of a fuzzy object-path lookup."""

    kind: MatchKind
    candidates: List[MapEntry] = field(default_factory=list)

    @property
    def entry(self) -> Optional[MapEntry]:
        """The matched entry, only when the match is unique."""
        if self.kind is MatchKind.UNIQUE:
            return self.candidates[0]
        return None

    @classmethod
    def from_candidates(cls, candidates: List[MapEntry]) -> "MatchResult":
        if not candidates:
            return cls(MatchKind.NONE)
        if len(candidates) == 1:
            return cls(MatchKind.UNIQUE, candidates)
        return cls(MatchKind.AMBIGUOUS, candidates)
