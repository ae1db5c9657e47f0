"""Per-request temporary files for uploads.

Every upload is spooled to its own file under the configured upload
directory and removed when the ``with`` block exits, whichever way it exits.
"""

from __future__ import annotations

import logging
import shutil
import tempfile
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator

logger = logging.getLogger(__name__)


def cleanup_temp_file(path: Path | None) -> None:
    """Remove a temp file, logging rather than raising if that fails."""
    if not path:
        return
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning("Could not remove temp upload %s: %s", path, e)


@contextmanager
def temporary_upload(
    source: BinaryIO, upload_dir: Path | str | None = None, suffix: str = "",
) -> Iterator[Path]:
    """Copy ``source`` to a fresh temp file and yield its path."""
    directory = Path(upload_dir) if upload_dir else Path(tempfile.gettempdir())
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"upload_{uuid.uuid4().hex}{suffix}"
    try:
        with open(path, "wb") as out:
            shutil.copyfileobj(source, out)
        yield path
    finally:
        cleanup_temp_file(path)
