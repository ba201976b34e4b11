"""
Persistence of the user's mod list (ModList.mods).

Layout: int32 count, then for every mod an int32 enabled flag followed by
the file name, display name and container name as length-prefixed strings.
A magic marker closes the file on save and is ignored on load.
"""

import io
import logging
from pathlib import Path
from typing import BinaryIO, List, Sequence

from .container import INT32, PACKAGE_MAGIC, UINT32, read_exact, read_string, write_string
from .models import ModDeclaration, ModEntry
from ..errors import ContainerParseError
from ..utils.fileio import atomic_write_bytes

logger = logging.getLogger(__name__)


def read_mod_list(stream: BinaryIO) -> List[ModEntry]:
    """Read mod entries from a mod-list stream.

    Only the persisted fields are filled in; redirects are recovered later by
    scanning the mod containers.

    Raises:
        ContainerParseError: If the stream is truncated or malformed
    """
    (count,) = INT32.unpack(read_exact(stream, INT32.size))
    if count < 0:
        raise ContainerParseError(f"Invalid mod count: {count}")

    mods: List[ModEntry] = []
    for _ in range(count):
        (enabled,) = INT32.unpack(read_exact(stream, INT32.size))
        file_name = read_string(stream)
        mod_name = read_string(stream)
        container = read_string(stream)
        mods.append(
            ModEntry(
                file=file_name,
                enabled=enabled != 0,
                declaration=ModDeclaration(container_name=container, mod_name=mod_name),
            )
        )
    return mods


def write_mod_list(mods: Sequence[ModEntry], stream: BinaryIO) -> None:
    """Write mod entries to a mod-list stream."""
    stream.write(INT32.pack(len(mods)))
    for mod in mods:
        stream.write(INT32.pack(1 if mod.enabled else 0))
        write_string(stream, mod.file)
        write_string(stream, mod.declaration.mod_name)
        write_string(stream, mod.declaration.container_name)
    stream.write(UINT32.pack(PACKAGE_MAGIC))


def load_mod_list(path: Path) -> List[ModEntry]:
    """Load the mod list from disk.

    Raises:
        OSError: If the file cannot be read
        ContainerParseError: If the file is malformed
    """
    with Path(path).open("rb") as f:
        mods = read_mod_list(f)
    logger.info(f"Loaded {len(mods)} mods from {path}")
    return mods


def save_mod_list(mods: Sequence[ModEntry], path: Path) -> None:
    """Save the mod list to disk, replacing the previous file atomically."""
    buffer = io.BytesIO()
    write_mod_list(mods, buffer)
    atomic_write_bytes(Path(path), buffer.getvalue())
    logger.debug(f"Saved {len(mods)} mods to {path}")
