"""
Composite package map support.

Provides the file cipher, the text codec, fuzzy object-path matching and the
in-memory `CompositeMap` built on top of them.
"""

from .mapper import CompositeMap
from .models import MapEntry, MatchKind, MatchResult, ParseResult
from .matcher import (
    KNOWN_SUFFIXES,
    ascii_eq_ignore_case,
    incomplete_paths_equal,
    normalize_object_name,
)
from . import cipher, codec

__all__ = [
    # Map
    "CompositeMap",
    # Models
    "MapEntry",
    "MatchKind",
    "MatchResult",
    "ParseResult",
    # Matching
    "KNOWN_SUFFIXES",
    "ascii_eq_ignore_case",
    "incomplete_paths_equal",
    "normalize_object_name",
    # Low-level modules
    "cipher",
    "codec",
]
