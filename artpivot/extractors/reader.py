"""Plain-text extraction from uploaded documents.

``.docx`` files are read with python-docx (paragraphs, then table cells, in
document order of each). ``.txt`` and ``.md`` files are decoded as UTF-8.
Everything else is rejected with UnsupportedFormatError.
"""

from __future__ import annotations

import logging
import zipfile
from pathlib import Path

import docx
from docx.opc.exceptions import PackageNotFoundError

logger = logging.getLogger(__name__)

DOCX_EXTENSIONS = {".docx"}
TEXT_EXTENSIONS = {".txt", ".md"}
SUPPORTED_EXTENSIONS = DOCX_EXTENSIONS | TEXT_EXTENSIONS


class UnsupportedFormatError(ValueError):
    """The file extension is not one we can read."""


class DocumentReadError(RuntimeError):
    """The file has a supported extension but could not be decoded."""


def _docx_text(path: Path) -> str:
    document = docx.Document(str(path))
    lines = [p.text for p in document.paragraphs]
    for table in document.tables:
        for row in table.rows:
            for cell in row.cells:
                lines.append(cell.text)
    return "\n".join(lines)


def read_document_text(path: Path | str, original_name: str | None = None) -> str:
    """Return the plain text of a document.

    ``original_name`` decides the format when ``path`` is a temp file with no
    meaningful extension.
    """
    path = Path(path)
    ext = Path(original_name or path.name).suffix.lower()

    if ext not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFormatError(
            f"Unsupported file type {ext or '(none)'}; only "
            + ", ".join(sorted(SUPPORTED_EXTENSIONS))
            + " are accepted. Legacy .doc files are binary Word documents "
            "with no reader here; save them as .docx first."
        )

    try:
        if ext in DOCX_EXTENSIONS:
            return _docx_text(path)
        return path.read_text(encoding="utf-8")
    except (PackageNotFoundError, zipfile.BadZipFile, KeyError, ValueError, OSError) as e:
        logger.error("Failed to read %s: %s", original_name or path, e)
        raise DocumentReadError(str(e)) from e
