from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, constr, field_validator
from pydantic.alias_generators import to_camel

from docgen.domain import DocumentType, JobRecord, JobStatus


class DocumentRequest(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    title: constr(strip_whitespace=True, min_length=1)
    content: constr(strip_whitespace=True, min_length=1)
    document_type: DocumentType
    template_name: str | None = None
    sections: tuple[str, ...] = Field(default_factory=tuple)
    additional_options: dict[str, Any] | None = None

    @field_validator("document_type", mode="before")
    @classmethod
    def _parse_document_type(cls, value: Any) -> Any:
        if isinstance(value, str):
            return DocumentType(value)
        return value

    @field_validator("sections", mode="before")
    @classmethod
    def _default_sections(cls, value: Any) -> Any:
        return () if value is None else value


class DocumentResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    title: str
    file_name: str | None = None
    file_url: str | None = None
    download_url: str | None = None
    status: JobStatus
    created_at: datetime | None = None
    completed_at: datetime | None = None
    error_message: str | None = None

    @classmethod
    def from_record(cls, record: JobRecord) -> "DocumentResponse":
        return cls(
            id=record.id,
            title=record.title,
            file_name=record.file_name,
            file_url=record.file_url,
            download_url=record.download_url,
            status=record.status,
            created_at=record.created_at,
            completed_at=record.completed_at,
            error_message=record.error_message,
        )

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class DocumentFileInfo(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    file_name: str
    size: int
    media_type: str
    download_url: str
