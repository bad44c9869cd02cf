"""Domain entities for document generation jobs."""
from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum


class DocumentType(str, Enum):
    """Office formats the service can produce."""

    SPREADSHEET = "SPREADSHEET"
    SLIDEDECK = "SLIDEDECK"

    @classmethod
    def _missing_(cls, value: object) -> "DocumentType | None":
        if isinstance(value, str):
            key = value.strip().upper()
            key = _LEGACY_NAMES.get(key, key)
            for member in cls:
                if member.value == key:
                    return member
        return None

    @property
    def url_segment(self) -> str:
        return _URL_SEGMENTS[self]

    @property
    def extension(self) -> str:
        return _EXTENSIONS[self]

    @property
    def media_type(self) -> str:
        return _MEDIA_TYPES[self]

    @classmethod
    def from_url_segment(cls, segment: str) -> "DocumentType | None":
        for member, value in _URL_SEGMENTS.items():
            if value == segment:
                return member
        return None


_LEGACY_NAMES = {"EXCEL": "SPREADSHEET", "POWERPOINT": "SLIDEDECK"}

_URL_SEGMENTS = {
    DocumentType.SPREADSHEET: "excel",
    DocumentType.SLIDEDECK: "ppt",
}

_EXTENSIONS = {
    DocumentType.SPREADSHEET: ".xlsx",
    DocumentType.SLIDEDECK: ".pptx",
}

_MEDIA_TYPES = {
    DocumentType.SPREADSHEET: "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    DocumentType.SLIDEDECK: "application/vnd.openxmlformats-officedocument.presentationml.presentation",
}


class JobStatus(str, Enum):
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self is not JobStatus.PROCESSING


NOT_FOUND_MESSAGE = "not found"


@dataclass(slots=True)
class JobRecord:
    """State of one document-generation job."""

    id: str
    title: str
    status: JobStatus
    created_at: datetime
    document_type: DocumentType | None = None
    file_name: str | None = None
    file_url: str | None = None
    download_url: str | None = None
    completed_at: datetime | None = None
    error_message: str | None = None

    @classmethod
    def processing(cls, job_id: str, title: str, document_type: DocumentType, now: datetime) -> "JobRecord":
        return cls(id=job_id, title=title, status=JobStatus.PROCESSING, created_at=now, document_type=document_type)

    def completed(self, file_name: str, now: datetime) -> "JobRecord":
        segment = self.document_type.url_segment if self.document_type else ""
        return replace(
            self,
            status=JobStatus.COMPLETED,
            file_name=file_name,
            file_url=f"/api/documents/{segment}/{file_name}",
            download_url=f"/api/documents/{segment}/download/{file_name}",
            completed_at=now,
            error_message=None,
        )

    def failed(self, message: str, now: datetime) -> "JobRecord":
        return replace(
            self,
            status=JobStatus.FAILED,
            file_name=None,
            file_url=None,
            download_url=None,
            completed_at=now,
            error_message=message,
        )

    @classmethod
    def not_found(cls, job_id: str, now: datetime) -> "JobRecord":
        return cls(
            id=job_id,
            title="Unknown",
            status=JobStatus.FAILED,
            created_at=now,
            completed_at=now,
            error_message=NOT_FOUND_MESSAGE,
        )

    def copy(self) -> "JobRecord":
        return replace(self)


@dataclass(frozen=True, slots=True)
class Slide:
    """One content slide of a deck, in rendering order."""

    title: str = ""
    content: str = ""
    notes: str = ""


SheetTable = dict[str, list[list[str]]]
