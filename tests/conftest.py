"""Shared fixtures and builders for tera-mod-manager tests."""

import struct
from pathlib import Path
from typing import Iterable, List, Sequence

import pytest

from tera_mod_manager.composite import CompositeMap, MapEntry
from tera_mod_manager.settings.paths import GamePaths

PACKAGE_TAG = b"\xc1\x83\x2a\x9e"
MAGIC = 0x9E2A83C1


def build_map(entries: Iterable[MapEntry]) -> CompositeMap:
    """Build an in-memory map holding copies of the given entries."""
    mapper = CompositeMap()
    mapper.entries = {entry.entry_id: entry.copy() for entry in entries}
    return mapper


def encode_string(value: str) -> bytes:
    """Length-prefixed single-byte string as stored in containers."""
    return struct.pack("<i", len(value)) + value.encode("ascii")


def build_container(
    container_name: str,
    object_paths: Sequence[str],
    mod_name: str = "Test Mod",
    author: str = "tester",
    payload_size: int = 32,
) -> bytes:
    """Build a packed mod container with one package per object path."""
    body = bytearray()
    offsets: List[int] = []
    for path in object_paths:
        offsets.append(len(body))
        body += PACKAGE_TAG + struct.pack("<HH", 610, 14) + b"\0" * 4
        body += encode_string("MOD:" + path)
        body += b"\xab" * payload_size

    meta_start = len(body)
    author_offset = len(body)
    body += encode_string(author)
    name_offset = len(body)
    body += encode_string(mod_name)
    container_offset = len(body)
    body += encode_string(container_name)
    offsets_offset = len(body)
    for offset in offsets:
        body += struct.pack("<i", offset)

    end = len(body) + 36
    body += struct.pack(
        "<8iI",
        0,
        1,
        author_offset,
        name_offset,
        container_offset,
        offsets_offset,
        len(object_paths),
        end - meta_start,
        MAGIC,
    )
    return bytes(body)


def build_raw_package(folder_name: str = "S1UI_Elin", payload_size: int = 64) -> bytes:
    """Build an unpacked game package (no mod trailer)."""
    return (
        PACKAGE_TAG
        + struct.pack("<HH", 610, 14)
        + b"\0" * 4
        + encode_string(folder_name)
        + b"\xcd" * payload_size
    )


@pytest.fixture
def clean_entries() -> List[MapEntry]:
    """Entries of a small unmodded game map."""
    return [
        MapEntry("S1_Weapons_C", "S1Weapons.Sword.Sword_C", "c1.sword", 0, 100),
        MapEntry("S1_Weapons_C", "S1Weapons.Axe.Axe", "c1.axe", 100, 200),
        MapEntry("S1_Elin_PC", "Elin.Body.Elin_Body_lod0", "c2.body", 0, 500),
        MapEntry("S1_Elin_PC", "Elin.Face.Elin_Face", "c2.face", 500, 300),
        MapEntry("S1_Armor", "Armor.Set.Helm", "c3.helm", 0, 50),
    ]


@pytest.fixture
def game_root(tmp_path: Path, clean_entries: List[MapEntry]) -> Path:
    """A game client directory with a live composite map and no backup."""
    root = tmp_path / "Client"
    cooked = root / "CookedPC"
    cooked.mkdir(parents=True)
    build_map(clean_entries).save(cooked / "CompositePackageMapper.dat")
    return root


@pytest.fixture
def game_paths(game_root: Path) -> GamePaths:
    return GamePaths.from_root(game_root)
