from __future__ import annotations

import sys
import threading
from datetime import datetime, timedelta
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from docgen.domain import NOT_FOUND_MESSAGE, DocumentType, JobRecord, JobStatus
from docgen.infrastructure import InMemoryJobStore

START = datetime(2025, 1, 2, 3, 4, 5)


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def _processing(job_id: str = "excel-1") -> JobRecord:
    return JobRecord.processing(job_id, "Budget", DocumentType.SPREADSHEET, START)


def test_records_are_copied_in_and_out():
    store = InMemoryJobStore()
    record = _processing()
    store.insert(record)

    record.title = "mutated by caller"
    fetched = store.get("excel-1")
    assert fetched.title == "Budget"

    fetched.title = "mutated again"
    assert store.get("excel-1").title == "Budget"


def test_duplicate_insert_is_rejected():
    store = InMemoryJobStore()
    store.insert(_processing())

    with pytest.raises(ValueError):
        store.insert(_processing())


def test_update_requires_existing_processing_record():
    store = InMemoryJobStore()
    with pytest.raises(KeyError):
        store.update(_processing().completed("a.xlsx", START))

    store.insert(_processing())
    store.update(_processing().completed("a.xlsx", START))
    with pytest.raises(ValueError):
        store.update(_processing().failed("late failure", START))

    record = store.get("excel-1")
    assert record.status is JobStatus.COMPLETED
    assert record.file_url == "/api/documents/excel/a.xlsx"
    assert record.download_url == "/api/documents/excel/download/a.xlsx"


def test_get_or_default_and_contains():
    store = InMemoryJobStore()
    fallback = JobRecord.not_found("missing", START)

    assert store.get("missing") is None
    assert store.contains("missing") is False
    assert store.get_or_default("missing", fallback) is fallback
    assert fallback.status is JobStatus.FAILED
    assert fallback.title == "Unknown"
    assert fallback.error_message == NOT_FOUND_MESSAGE

    store.insert(_processing())
    assert store.contains("excel-1") is True
    assert store.get_or_default("excel-1", fallback).status is JobStatus.PROCESSING


def test_remove_and_reset():
    store = InMemoryJobStore()
    store.insert(_processing("excel-1"))
    store.insert(_processing("excel-2"))

    store.remove("excel-1")
    store.remove("never-existed")
    assert store.size() == 1

    store.reset()
    assert store.size() == 0


def test_terminal_records_expire_after_ttl():
    clock = FakeClock(START)
    store = InMemoryJobStore(ttl_seconds=60, clock=clock)
    store.insert(_processing("excel-done"))
    store.insert(_processing("excel-running"))
    store.update(_processing("excel-done").failed("boom", START))

    clock.now = START + timedelta(seconds=30)
    assert store.contains("excel-done")

    clock.now = START + timedelta(seconds=61)
    assert store.get("excel-done") is None
    assert store.get("excel-running").status is JobStatus.PROCESSING


def test_concurrent_inserts_and_updates():
    store = InMemoryJobStore()
    ids = [f"excel-{index}" for index in range(200)]

    def work(job_id: str) -> None:
        store.insert(_processing(job_id))
        store.update(_processing(job_id).completed(f"{job_id}.xlsx", START))

    threads = [threading.Thread(target=work, args=(job_id,)) for job_id in ids]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert store.size() == len(ids)
    assert all(store.get(job_id).status is JobStatus.COMPLETED for job_id in ids)
