"""Writes a composed document set to the output directory."""

import logging
from pathlib import Path

from spec2llms.errors import OutputError
from spec2llms.generator.composer import DocumentSet

logger = logging.getLogger(__name__)

INDEX_FILENAME = "llms.txt"
ENDPOINTS_DIR = "endpoints"


def write_documents(output_dir: Path, documents: DocumentSet) -> list[Path]:
    """Write ``llms.txt`` and ``endpoints/*.txt`` under ``output_dir``.

    Returns the written paths, group documents first and the index last.
    """
    endpoints_dir = output_dir / ENDPOINTS_DIR
    try:
        endpoints_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise OutputError(f"failed to create output directory {endpoints_dir}: {e}") from e

    written = []
    for group in documents.groups:
        written.append(_write(endpoints_dir / group.filename, group.text))
    written.append(_write(output_dir / INDEX_FILENAME, documents.index))
    return written


def _write(path: Path, content: str) -> Path:
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise OutputError(f"failed to write {path}: {e}") from e
    logger.debug("Wrote %s", path)
    return path
