"""
Fuzzy comparison of object paths.

Mods and the game often spell the same object differently: a different
package prefix, a directory in front, a class suffix, or different casing.
Both sides are reduced to a bare object name before comparing.
"""

from typing import Tuple

PATH_SEPARATOR = "/"
NAMESPACE_SEPARATOR = "."

KNOWN_SUFFIXES: Tuple[str, ...] = ("_C", "_dup", "_lod0", "_lod1", "_lod2", "_lod3")
"""Class and variant markers stripped from object names, in this order."""

_ASCII_LOWER = str.maketrans(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ", "abcdefghijklmnopqrstuvwxyz"
)


def ascii_lower(value: str) -> str:
    """Lowercase ASCII letters only, leaving other characters untouched."""
    return value.translate(_ASCII_LOWER)


def normalize_object_name(path: str) -> str:
    """Reduce an object path to its comparable object name.

    Takes the part after the last '/', then the part after the last '.',
    strips each known suffix at most once and lowercases ASCII letters.

    Examples:
        "Package.Group.Weapon_C" -> "weapon"
        "other/Package.Group.weapon" -> "weapon"
    """
    name = path.rsplit(PATH_SEPARATOR, 1)[-1]
    name = name.rsplit(NAMESPACE_SEPARATOR, 1)[-1]

    for suffix in KNOWN_SUFFIXES:
        if name.endswith(suffix):
            name = name[: -len(suffix)]

    return ascii_lower(name)


def ascii_eq_ignore_case(a: str, b: str) -> bool:
    """Compare two strings ignoring ASCII case only."""
    return len(a) == len(b) and ascii_lower(a) == ascii_lower(b)


def incomplete_paths_equal(full: str, incomplete: str) -> bool:
    """Check whether an incomplete object path refers to the same object as a full one."""
    return ascii_eq_ignore_case(
        normalize_object_name(full), normalize_object_name(incomplete)
    )
