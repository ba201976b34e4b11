"""
Reader for packed mod containers (.gpk).

A packed mod is a concatenation of composite packages followed by a
metadata block and a fixed trailer of little-endian int32 fields counted
back from the end of the file:

    -36 region lock      -32 mod file version   -28 author offset
    -24 name offset      -20 container offset   -16 offsets table offset
    -12 package count    -8  metadata size      -4  magic 0x9E2A83C1

A file without the magic is treated as a single raw package.
"""

import io
import logging
import struct
from pathlib import Path
from typing import BinaryIO, List, Tuple

from .models import ModDeclaration, ObjectRedirect
from ..errors import ContainerParseError

logger = logging.getLogger(__name__)

PACKAGE_MAGIC = 0x9E2A83C1
MAX_STRLEN = 1024
MOD_FOLDER_PREFIX = "MOD:"
CONTAINER_EXTENSION = ".gpk"

INT32 = struct.Struct("<i")
UINT32 = struct.Struct("<I")

TRAILER_FIELDS = (
    "region_lock",
    "mod_file_version",
    "author_offset",
    "name_offset",
    "container_offset",
    "offsets_offset",
    "package_count",
    "meta_size",
)
TRAILER = struct.Struct("<8iI")
"""Trailer fields in file order, followed by the magic."""

PACKAGE_HEADER = struct.Struct("<4sHH")
"""Package tag, file version, licensee version."""
FOLDER_NAME_OFFSET = 12


def read_exact(stream: BinaryIO, size: int) -> bytes:
    data = stream.read(size)
    if len(data) != size:
        raise ContainerParseError(
            f"Unexpected end of container: wanted {size} bytes, got {len(data)}"
        )
    return data


def read_string(stream: BinaryIO) -> str:
    """Read a length-prefixed string.

    A negative length means UTF-16LE characters, a positive one single-byte
    characters. A trailing NUL is dropped.

    Raises:
        ContainerParseError: If the string is too long or truncated
    """
    (size,) = INT32.unpack(read_exact(stream, INT32.size))
    if size == 0:
        return ""

    is_wide = size < 0
    size = abs(size)
    if size > MAX_STRLEN:
        raise ContainerParseError(f"String too long: {size} characters")

    raw = read_exact(stream, size * 2 if is_wide else size)
    text = raw.decode("utf-16-le" if is_wide else "utf-8", errors="replace")
    if text.endswith("\0"):
        text = text[:-1]
    return text


def write_string(stream: BinaryIO, value: str) -> None:
    """Write a length-prefixed string; non-ASCII text is stored as UTF-16LE."""
    if value.isascii():
        stream.write(INT32.pack(len(value)))
        stream.write(value.encode("ascii"))
    else:
        encoded = value.encode("utf-16-le")
        stream.write(INT32.pack(-(len(encoded) // 2)))
        stream.write(encoded)


def _read_package_header(stream: BinaryIO) -> Tuple[int, str, int, int]:
    """Read one composite package header at the current position.

    Returns:
        (offset, object_path, file_version, licensee_version)
    """
    offset = stream.tell()
    _tag, file_version, licensee_version = PACKAGE_HEADER.unpack(
        read_exact(stream, PACKAGE_HEADER.size)
    )
    stream.seek(offset + FOLDER_NAME_OFFSET)
    folder_name = read_string(stream)

    object_path = ""
    if folder_name.startswith(MOD_FOLDER_PREFIX):
        object_path = folder_name[len(MOD_FOLDER_PREFIX):]

    return offset, object_path, file_version, licensee_version


def _seek_within(stream: BinaryIO, offset: int, end: int, what: str) -> None:
    if not 0 <= offset < end:
        raise ContainerParseError(f"{what.capitalize()} offset out of range: {offset}")
    stream.seek(offset)


def read_mod_file(stream: BinaryIO) -> ModDeclaration:
    """Parse a mod container into a declaration with resolved redirects.

    Raises:
        ContainerParseError: If the container layout is inconsistent
    """
    stream.seek(0, io.SEEK_END)
    end = stream.tell()
    if end < UINT32.size:
        raise ContainerParseError(f"Container too small: {end} bytes")

    stream.seek(end - UINT32.size)
    (magic,) = UINT32.unpack(read_exact(stream, UINT32.size))

    if magic != PACKAGE_MAGIC:
        stream.seek(0)
        _, object_path, file_version, licensee_version = _read_package_header(stream)
        return ModDeclaration(
            redirects=[
                ObjectRedirect.resolved(
                    object_path, 0, end, file_version, licensee_version
                )
            ]
        )

    if end < TRAILER.size:
        raise ContainerParseError("Container trailer is truncated")

    stream.seek(end - TRAILER.size)
    values = TRAILER.unpack(read_exact(stream, TRAILER.size))
    trailer = dict(zip(TRAILER_FIELDS, values))

    count = trailer["package_count"]
    meta_size = trailer["meta_size"]
    if count < 0 or meta_size < 0 or meta_size > end:
        raise ContainerParseError(
            f"Invalid trailer: {count} packages, metadata size {meta_size}"
        )

    declaration = ModDeclaration(
        region_lock=trailer["region_lock"] != 0,
        mod_file_version=trailer["mod_file_version"],
    )

    _seek_within(stream, trailer["author_offset"], end, "author")
    declaration.mod_author = read_string(stream)
    _seek_within(stream, trailer["name_offset"], end, "name")
    declaration.mod_name = read_string(stream)
    _seek_within(stream, trailer["container_offset"], end, "container name")
    declaration.container_name = read_string(stream)

    _seek_within(stream, trailer["offsets_offset"], end, "offsets table")
    offsets: List[int] = [
        INT32.unpack(read_exact(stream, INT32.size))[0] for _ in range(count)
    ]

    # Each package runs up to the next one; the last ends where metadata begins
    packages_end = end - meta_size
    bounds = offsets + [packages_end]
    if any(a >= b for a, b in zip(bounds, bounds[1:])):
        raise ContainerParseError(f"Package offsets not increasing: {offsets}")

    headers = []
    for offset in offsets:
        _seek_within(stream, offset, end, "package")
        headers.append(_read_package_header(stream))

    for index, (offset, object_path, file_version, licensee_version) in enumerate(headers):
        next_offset = headers[index + 1][0] if index + 1 < len(headers) else packages_end
        declaration.redirects.append(
            ObjectRedirect.resolved(
                object_path, offset, next_offset - offset, file_version, licensee_version
            )
        )

    logger.debug(
        f"Read container '{declaration.container_name}' with {count} packages"
    )
    return declaration


def needs_filename_fallback(declaration: ModDeclaration) -> bool:
    """True when a parsed container carries nothing the map can be patched with."""
    redirects = declaration.redirects
    if not redirects:
        return True
    if len(redirects) == 1 and redirects[0].size == 0:
        return True
    return not any(r.object_path for r in redirects)


def container_stem(file_name: str) -> str:
    """File name without the container extension."""
    if file_name.endswith(CONTAINER_EXTENSION):
        return file_name[: -len(CONTAINER_EXTENSION)]
    return file_name


def read_mod_path(path: Path) -> ModDeclaration:
    """Open and parse a mod container from disk.

    Raises:
        OSError: If the file cannot be opened
        ContainerParseError: If the container layout is inconsistent
    """
    with Path(path).open("rb") as f:
        try:
            return read_mod_file(f)
        except struct.error as e:
            raise ContainerParseError(f"Malformed container {path}: {e}") from e
