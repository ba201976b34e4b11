"""
File-system helpers shared by the map and mod-list writers.
"""

import logging
import os
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)


def atomic_write_bytes(path: Path, data: bytes) -> None:
    """Write `data` to `path` so readers only ever see the old or the new file.

    The bytes go to a temporary file in the same directory, which then
    replaces the target. On failure the temporary file is removed and the
    target keeps its previous content.

    Raises:
        OSError: If the temporary file cannot be written or moved into place
    """
    path = Path(path)
    fd, tmp_name = tempfile.mkstemp(
        dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
    )
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise

    logger.debug(f"Wrote {len(data)} bytes to {path}")
