"""Infrastructure layer for job state persistence."""
from __future__ import annotations

import threading
from datetime import datetime, timedelta
from typing import Callable, Protocol

from docgen.domain import JobRecord


class JobStore(Protocol):
    """Persistence contract for generation job records."""

    def insert(self, record: JobRecord) -> None: ...

    def update(self, record: JobRecord) -> None: ...

    def get(self, job_id: str) -> JobRecord | None: ...

    def get_or_default(self, job_id: str, default: JobRecord) -> JobRecord: ...

    def contains(self, job_id: str) -> bool: ...

    def remove(self, job_id: str) -> None: ...

    def reset(self) -> None: ...


class InMemoryJobStore:
    """Thread-safe in-memory store, optionally evicting old terminal records.

    Records are copied on the way in and on the way out so callers never share
    the authoritative instance.
    """

    def __init__(
        self,
        *,
        ttl_seconds: float | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._records: dict[str, JobRecord] = {}
        self._lock = threading.Lock()
        self._ttl = timedelta(seconds=ttl_seconds) if ttl_seconds else None
        self._clock = clock

    # ------------------------------------------------------------------
    # internal helpers
    # ------------------------------------------------------------------
    def _evict_expired(self) -> None:
        if self._ttl is None:
            return
        cutoff = self._clock() - self._ttl
        expired = [
            job_id
            for job_id, record in self._records.items()
            if record.status.is_terminal and record.completed_at is not None and record.completed_at < cutoff
        ]
        for job_id in expired:
            del self._records[job_id]

    # ------------------------------------------------------------------
    # CRUD operations
    # ------------------------------------------------------------------
    def insert(self, record: JobRecord) -> None:
        with self._lock:
            self._evict_expired()
            if record.id in self._records:
                raise ValueError(f"job {record.id} already exists")
            self._records[record.id] = record.copy()

    def update(self, record: JobRecord) -> None:
        with self._lock:
            current = self._records.get(record.id)
            if current is None:
                raise KeyError(record.id)
            if current.status.is_terminal:
                raise ValueError(f"job {record.id} is already {current.status.value}")
            self._records[record.id] = record.copy()

    def get(self, job_id: str) -> JobRecord | None:
        with self._lock:
            self._evict_expired()
            record = self._records.get(job_id)
            return record.copy() if record is not None else None

    def get_or_default(self, job_id: str, default: JobRecord) -> JobRecord:
        record = self.get(job_id)
        return record if record is not None else default

    def contains(self, job_id: str) -> bool:
        with self._lock:
            self._evict_expired()
            return job_id in self._records

    def remove(self, job_id: str) -> None:
        with self._lock:
            self._records.pop(job_id, None)

    def size(self) -> int:
        with self._lock:
            self._evict_expired()
            return len(self._records)

    def reset(self) -> None:
        with self._lock:
            self._records.clear()
