"""
Building mod declarations from container files.

Packed containers describe their redirects directly. Raw containers (a
plain game package renamed by the user) are matched to the composite map by
file name: a map container matches when either lowercase stem contains the
other, and each of its object paths becomes an unresolved redirect.
"""

import logging
from pathlib import Path
from typing import Dict, Optional

from .container import container_stem, needs_filename_fallback, read_mod_path
from .models import ModDeclaration, ObjectRedirect
from ..composite import CompositeMap
from ..errors import ContainerParseError, UnresolvedModError

logger = logging.getLogger(__name__)


def stems_match(mod_stem: str, entry_stem: str) -> bool:
    """Case-insensitive containment in either direction; empty stems never match."""
    a = mod_stem.lower()
    b = entry_stem.lower()
    if not a or not b:
        return False
    return a in b or b in a


def synthesize_raw_declaration(
    file_name: str, composite_map: CompositeMap
) -> Optional[ModDeclaration]:
    """Guess a raw mod's targets from its file name.

    Returns:
        A declaration with unresolved redirects, or None if no map container
        matches the file name.
    """
    mod_stem = container_stem(file_name)
    object_paths: Dict[str, None] = {}

    for entry in composite_map:
        if stems_match(mod_stem, container_stem(entry.container_file)):
            object_paths.setdefault(entry.object_path, None)

    if not object_paths:
        return None

    return ModDeclaration(
        container_name=mod_stem,
        redirects=[ObjectRedirect.unresolved(path) for path in object_paths],
        mod_name=file_name,
    )


def load_declaration(path: Path, composite_map: CompositeMap) -> ModDeclaration:
    """Read a mod container, falling back to file-name matching for raw files.

    Raises:
        OSError: If the file cannot be read
        UnresolvedModError: If a raw container matches nothing in the map
    """
    path = Path(path)
    file_name = path.name

    try:
        declaration: Optional[ModDeclaration] = read_mod_path(path)
    except ContainerParseError as e:
        logger.debug(f"Container parse failed for {file_name}: {e}")
        declaration = None

    if declaration is None or needs_filename_fallback(declaration):
        logger.info(f"'{file_name}' is a raw package, matching by file name")
        raw = synthesize_raw_declaration(file_name, composite_map)
        if raw is None:
            raise UnresolvedModError(
                f"Could not auto-detect target for raw mod '{file_name}'. "
                "Rename it to match the game file (e.g. S1_Elin_PC.gpk)."
            )
        if declaration is not None and declaration.mod_name:
            raw.mod_name = declaration.mod_name
        logger.info(
            f"Associated '{file_name}' with {len(raw.redirects)} game objects"
        )
        return raw

    if not declaration.container_name:
        declaration.container_name = container_stem(file_name)
    return declaration
