"""
Text grammar of the decrypted composite map.

    file   := block*
    block  := filename "?" record* "!"
    record := object_path "," entry_id "," offset "," size ",|"

The written filename of a block is the current container of its entries.
Within a block, records are written in ascending offset order because the
game reads them that way.
"""

import logging
from typing import Dict, Iterable, List, Optional, Union

from .models import MapEntry, ParseResult

logger = logging.getLogger(__name__)

FILENAME_END = "?"
BLOCK_END = "!"
RECORD_END = ",|"
FIELD_SEP = ","


def _parse_number(value: str) -> int:
    """Parse an unsigned decimal field, falling back to 0."""
    if value.isascii() and value.isdigit():
        return int(value)
    return 0


def _parse_record(record: str, container: str) -> Optional[MapEntry]:
    fields = record.split(FIELD_SEP)
    if len(fields) < 2:
        logger.debug(f"Skipping record without entry id in '{container}': {record!r}")
        return None

    return MapEntry(
        container_file=container,
        object_path=fields[0],
        entry_id=fields[1],
        offset=_parse_number(fields[2]) if len(fields) > 2 else 0,
        size=_parse_number(fields[3]) if len(fields) > 3 else 0,
    )


def parse(data: Union[bytes, str]) -> ParseResult:
    """Parse decrypted map text into entries.

    Parsing is lenient: bytes are decoded with replacement characters,
    unparsable numbers become 0, and a block missing its closing delimiter
    stops the scan with `truncated` set instead of raising.
    """
    text = data.decode("utf-8", errors="replace") if isinstance(data, bytes) else data

    entries: Dict[str, MapEntry] = {}
    truncated = False
    cursor = 0

    while True:
        name_end = text.find(FILENAME_END, cursor)
        if name_end < 0:
            if text[cursor:].strip():
                truncated = True
            break

        container = text[cursor:name_end]
        block_start = name_end + 1
        block_end = text.find(BLOCK_END, block_start)
        if block_end < 0:
            truncated = True
            break

        block = text[block_start:block_end]
        pos = 0
        while True:
            record_end = block.find(RECORD_END, pos)
            if record_end < 0:
                break
            entry = _parse_record(block[pos:record_end], container)
            pos = record_end + len(RECORD_END)
            if entry is not None:
                entries[entry.entry_id] = entry

        cursor = block_end + 1

    if truncated:
        logger.warning(
            f"Composite map text ended early; recovered {len(entries)} entries"
        )

    return ParseResult(entries=list(entries.values()), truncated=truncated)


def group_by_container(entries: Iterable[MapEntry]) -> Dict[str, List[MapEntry]]:
    """Group entries by container in first-seen order, each group sorted by offset."""
    groups: Dict[str, List[MapEntry]] = {}
    for entry in entries:
        groups.setdefault(entry.container_file, []).append(entry)

    for group in groups.values():
        group.sort(key=lambda e: e.offset)

    return groups


def serialize(entries: Iterable[MapEntry]) -> str:
    """Serialize entries back into map text."""
    parts: List[str] = []

    for container, group in group_by_container(entries).items():
        # An empty filename would produce a block the game cannot resolve
        if not container:
            continue

        parts.append(container)
        parts.append(FILENAME_END)
        for entry in group:
            parts.append(
                f"{entry.object_path}{FIELD_SEP}{entry.entry_id}{FIELD_SEP}"
                f"{entry.offset}{FIELD_SEP}{entry.size}{RECORD_END}"
            )
        parts.append(BLOCK_END)

    return "".join(parts)
