from __future__ import annotations

import uuid
from datetime import datetime
from typing import Callable

import structlog

from docgen.core.errors import DocumentGenerationError, TypeMismatch
from docgen.core.schema import DocumentRequest
from docgen.domain import DocumentType, JobRecord
from docgen.exporters.base import DocumentExporter
from docgen.extractors import ContentStructurer
from docgen.infrastructure import JobStore
from docgen.workers.pool import GenerationWorkerPool

logger = structlog.get_logger(__name__)

UNEXPECTED_FAILURE_MESSAGE = "An internal error occurred while generating the document."


class DocumentGenerationOrchestrator:
    """Owns the job lifecycle for one document type.

    ``submit`` records the job as PROCESSING and hands the work to the pool;
    the background task writes exactly one terminal record afterwards.
    """

    document_type: DocumentType

    def __init__(
        self,
        structurer: ContentStructurer,
        exporter: DocumentExporter,
        store: JobStore,
        pool: GenerationWorkerPool,
        *,
        id_factory: Callable[[], str] | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._structurer = structurer
        self._exporter = exporter
        self._store = store
        self._pool = pool
        self._id_factory = id_factory or self._new_job_id
        self._clock = clock

    @property
    def exporter(self) -> DocumentExporter:
        return self._exporter

    def _new_job_id(self) -> str:
        return f"{self.document_type.url_segment}-{uuid.uuid4().hex}"

    # ------------------------------------------------------------------
    # job orchestration
    # ------------------------------------------------------------------
    def submit(self, request: DocumentRequest) -> str:
        if request.document_type is not self.document_type:
            raise TypeMismatch(f"Not a {self.document_type.value} document request.")

        record = JobRecord.processing(self._id_factory(), request.title, self.document_type, self._clock())
        self._store.insert(record)
        try:
            self._pool.submit(self._run, record, request)
        except Exception:
            self._store.remove(record.id)
            raise
        logger.info("document_job_submitted", job_id=record.id, document_type=self.document_type.value)
        return record.id

    def status(self, job_id: str) -> JobRecord:
        return self._store.get_or_default(job_id, JobRecord.not_found(job_id, self._clock()))

    def find(self, job_id: str) -> JobRecord | None:
        return self._store.get(job_id)

    def owns(self, job_id: str) -> bool:
        return self._store.contains(job_id)

    def _run(self, record: JobRecord, request: DocumentRequest) -> None:
        try:
            file_name = self._render(request)
        except DocumentGenerationError as exc:
            logger.warning("document_job_failed", job_id=record.id, error=str(exc))
            terminal = record.failed(str(exc) or UNEXPECTED_FAILURE_MESSAGE, self._clock())
        except Exception:
            logger.exception("document_job_crashed", job_id=record.id)
            terminal = record.failed(UNEXPECTED_FAILURE_MESSAGE, self._clock())
        else:
            logger.info("document_job_completed", job_id=record.id, file_name=file_name)
            terminal = record.completed(file_name, self._clock())
        self._store.update(terminal)

    def _render(self, request: DocumentRequest) -> str:
        raise NotImplementedError


class SpreadsheetOrchestrator(DocumentGenerationOrchestrator):
    document_type = DocumentType.SPREADSHEET

    def _render(self, request: DocumentRequest) -> str:
        table = self._structurer.structure_table(request.title, request.content, request.sections)
        return self._exporter.build(request.title, table)


class SlideDeckOrchestrator(DocumentGenerationOrchestrator):
    document_type = DocumentType.SLIDEDECK

    def _render(self, request: DocumentRequest) -> str:
        slides = self._structurer.structure_slides(request.title, request.content, request.sections)
        return self._exporter.build(request.title, slides)
