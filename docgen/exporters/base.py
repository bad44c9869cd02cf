from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Callable

import structlog

from docgen.core.errors import BuildFailed
from docgen.core.naming import build_file_name
from docgen.core.storage import publish_file

logger = structlog.get_logger(__name__)


class DocumentExporter:
    """Shared naming and persistence for document builders."""

    extension = ""
    format_label = "document"

    def __init__(self, output_dir: Path, *, clock: Callable[[], datetime] = datetime.now) -> None:
        self._output_dir = Path(output_dir)
        self._clock = clock

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    def file_name_for(self, title: str) -> str:
        return build_file_name(title, self.extension, self._clock())

    def _publish(self, title: str, write: Callable[[Path], None]) -> str:
        file_name = self.file_name_for(title)
        try:
            publish_file(self._output_dir, file_name, write)
        except BuildFailed:
            raise
        except Exception as exc:
            logger.error("document_build_failed", format=self.format_label, file_name=file_name, error=str(exc))
            raise BuildFailed(f"Failed to create {self.format_label} file: {exc}") from exc
        return file_name
