"""
Mod containers, declarations and the persisted mod list.
"""

from .models import ModDeclaration, ModEntry, ObjectRedirect, PackageLocation
from .container import (
    PACKAGE_MAGIC,
    container_stem,
    read_mod_file,
    read_mod_path,
    read_string,
    write_string,
)
from .mod_list import load_mod_list, read_mod_list, save_mod_list, write_mod_list
from .resolver import load_declaration, synthesize_raw_declaration

__all__ = [
    # Models
    "ModDeclaration",
    "ModEntry",
    "ObjectRedirect",
    "PackageLocation",
    # Containers
    "PACKAGE_MAGIC",
    "container_stem",
    "read_mod_file",
    "read_mod_path",
    "read_string",
    "write_string",
    # Mod list
    "load_mod_list",
    "read_mod_list",
    "save_mod_list",
    "write_mod_list",
    # Resolution
    "load_declaration",
    "synthesize_raw_declaration",
]
