"""Domain layer definitions."""

from .documents import NOT_FOUND_MESSAGE, DocumentType, JobRecord, JobStatus, SheetTable, Slide

__all__ = [
    "DocumentType",
    "JobRecord",
    "JobStatus",
    "NOT_FOUND_MESSAGE",
    "SheetTable",
    "Slide",
]
