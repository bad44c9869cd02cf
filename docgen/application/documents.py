"""Application service layer routing generation requests to per-type orchestrators."""
from __future__ import annotations

import threading
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable

from docgen.core.config import Settings
from docgen.core.errors import UnsupportedType
from docgen.core.schema import DocumentRequest
from docgen.domain import DocumentType, JobRecord
from docgen.exporters import SlideDeckExporter, SpreadsheetExporter
from docgen.extractors import ContentStructurer
from docgen.infrastructure import InMemoryJobStore, TextGenerator, get_text_generator
from docgen.workers.generation import DocumentGenerationOrchestrator, SlideDeckOrchestrator, SpreadsheetOrchestrator
from docgen.workers.pool import GenerationWorkerPool


class GeneratorRouter:
    """Dispatches requests by document type and resolves job ids to their owner.

    Job ids start with the URL segment of their document type, which selects the
    owning orchestrator directly.  Ids without a known prefix, or not held by the
    orchestrator their prefix names, are probed against the orchestrators in
    :class:`DocumentType` declaration order.
    """

    def __init__(
        self,
        orchestrators: Iterable[DocumentGenerationOrchestrator],
        *,
        pool: GenerationWorkerPool | None = None,
        structurer: ContentStructurer | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._orchestrators = {orchestrator.document_type: orchestrator for orchestrator in orchestrators}
        self._probe_order = [document_type for document_type in DocumentType if document_type in self._orchestrators]
        self._pool = pool
        self._structurer = structurer
        self._clock = clock

    # ------------------------------------------------------------------
    # dispatch
    # ------------------------------------------------------------------
    def document_types(self) -> list[DocumentType]:
        return list(self._probe_order)

    def orchestrator_for(self, document_type: DocumentType) -> DocumentGenerationOrchestrator:
        orchestrator = self._orchestrators.get(document_type)
        if orchestrator is None:
            raise UnsupportedType(f"Unsupported document type: {getattr(document_type, 'value', document_type)}")
        return orchestrator

    def submit(self, request: DocumentRequest) -> str:
        return self.orchestrator_for(request.document_type).submit(request)

    def output_dir(self, document_type: DocumentType) -> Path:
        return self.orchestrator_for(document_type).exporter.output_dir

    # ------------------------------------------------------------------
    # status lookup
    # ------------------------------------------------------------------
    def _tagged_owner(self, job_id: str) -> DocumentGenerationOrchestrator | None:
        prefix, separator, _ = job_id.partition("-")
        if not separator:
            return None
        document_type = DocumentType.from_url_segment(prefix)
        return self._orchestrators.get(document_type) if document_type else None

    def lookup(self, job_id: str) -> JobRecord | None:
        owner = self._tagged_owner(job_id)
        if owner is not None:
            record = owner.find(job_id)
            if record is not None:
                return record
        for document_type in self._probe_order:
            orchestrator = self._orchestrators[document_type]
            if orchestrator is owner:
                continue
            record = orchestrator.find(job_id)
            if record is not None:
                return record
        return None

    def status(self, job_id: str) -> JobRecord:
        record = self.lookup(job_id)
        if record is not None:
            return record
        owner = self._tagged_owner(job_id)
        if owner is None and self._probe_order:
            owner = self._orchestrators[self._probe_order[-1]]
        if owner is not None:
            return owner.status(job_id)
        return JobRecord.not_found(job_id, self._clock())

    def shutdown(self, wait: bool = True) -> None:
        if self._pool is not None:
            self._pool.shutdown(wait=wait)
        if self._structurer is not None:
            self._structurer.close()


def build_generator_router(settings: Settings, generator: TextGenerator | None = None) -> GeneratorRouter:
    """Wire the structurer, exporters, stores and worker pool for both document types."""

    structurer = ContentStructurer(generator or get_text_generator(), timeout=settings.llm_timeout)
    pool = GenerationWorkerPool(settings.workers, settings.queue_capacity)
    orchestrators = [
        SpreadsheetOrchestrator(
            structurer,
            SpreadsheetExporter(settings.output_dir),
            InMemoryJobStore(ttl_seconds=settings.job_ttl_seconds),
            pool,
        ),
        SlideDeckOrchestrator(
            structurer,
            SlideDeckExporter(settings.output_dir),
            InMemoryJobStore(ttl_seconds=settings.job_ttl_seconds),
            pool,
        ),
    ]
    return GeneratorRouter(orchestrators, pool=pool, structurer=structurer)


_router: GeneratorRouter | None = None
_router_lock = threading.Lock()


def configure_generator_router(router: GeneratorRouter) -> None:
    """Install the router used by the HTTP layer, shutting down the previous one."""

    global _router
    with _router_lock:
        previous, _router = _router, router
    if previous is not None and previous is not router:
        previous.shutdown(wait=False)


def get_generator_router() -> GeneratorRouter:
    """Return the process-wide router, building it from the environment on first use."""

    global _router
    with _router_lock:
        if _router is None:
            _router = build_generator_router(Settings.from_env())
        return _router


def reset_generator_router() -> None:
    """Drop the process-wide router (used in tests)."""

    global _router
    with _router_lock:
        previous, _router = _router, None
    if previous is not None:
        previous.shutdown(wait=True)
