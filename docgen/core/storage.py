from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Callable

import structlog

logger = structlog.get_logger(__name__)


def ensure_output_root(root: Path) -> Path:
    """Ensure the output folder exists and return it."""

    root.mkdir(parents=True, exist_ok=True)
    return root


def publish_file(root: Path, file_name: str, write: Callable[[Path], None]) -> Path:
    """Write a file under a temporary name, then atomically move it into place.

    ``write`` receives the temporary path and must fully write the document.
    The final name only becomes visible once ``write`` has returned.
    """

    ensure_output_root(root)
    destination = root / Path(file_name).name
    fd, temp_name = tempfile.mkstemp(prefix=".partial-", suffix=destination.suffix, dir=root)
    os.close(fd)
    temp_path = Path(temp_name)
    try:
        write(temp_path)
        os.replace(temp_path, destination)
    except BaseException:
        temp_path.unlink(missing_ok=True)
        raise
    logger.info("document_file_published", path=str(destination), size=destination.stat().st_size)
    return destination


def resolve_output_file(root: Path, file_name: str) -> Path | None:
    """Return the published file for ``file_name`` or ``None`` when it does not exist.

    Raises ``ValueError`` when the name escapes the output folder.
    """

    base = root.resolve()
    candidate = (base / file_name).resolve()
    if candidate.parent != base:
        raise ValueError("invalid file name")
    if candidate.name.startswith(".partial-") or not candidate.is_file():
        return None
    return candidate
