from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, HTTPException
from fastapi.responses import FileResponse, JSONResponse

from docgen.application import get_generator_router
from docgen.core.schema import DocumentFileInfo, DocumentRequest, DocumentResponse
from docgen.core.storage import resolve_output_file
from docgen.domain import DocumentType

router = APIRouter(prefix="/documents", tags=["documents"])


def _document_type_for(segment: str) -> DocumentType:
    document_type = DocumentType.from_url_segment(segment)
    if document_type is None or document_type not in get_generator_router().document_types():
        raise HTTPException(status_code=404, detail="unknown document type")
    return document_type


def _published_file(document_type: DocumentType, file_name: str) -> Path:
    root = get_generator_router().output_dir(document_type)
    if not file_name.endswith(document_type.extension):
        raise HTTPException(status_code=404, detail="file not found")
    try:
        path = resolve_output_file(root, file_name)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail="invalid file name") from exc
    if path is None:
        raise HTTPException(status_code=404, detail="file not found")
    return path


@router.post("", status_code=201)
async def create_document(payload: DocumentRequest) -> JSONResponse:
    """Start a generation job and return its PROCESSING record."""
    generators = get_generator_router()
    job_id = generators.submit(payload)
    record = generators.status(job_id)
    return JSONResponse(
        DocumentResponse.from_record(record).to_payload(),
        status_code=201,
        headers={"Location": f"/api/documents/{job_id}"},
    )


@router.get("/{document_id}")
async def get_document_status(document_id: str) -> dict:
    record = get_generator_router().lookup(document_id)
    if record is None:
        raise HTTPException(status_code=404, detail="document not found")
    return DocumentResponse.from_record(record).to_payload()


@router.get("/{segment}/download/{file_name}")
async def download_document(segment: str, file_name: str) -> FileResponse:
    document_type = _document_type_for(segment)
    path = _published_file(document_type, file_name)
    return FileResponse(
        path,
        media_type=document_type.media_type,
        headers={"Content-Disposition": f'attachment; filename="{path.name}"'},
    )


@router.get("/{segment}/{file_name}")
async def get_document_file(segment: str, file_name: str) -> dict:
    document_type = _document_type_for(segment)
    path = _published_file(document_type, file_name)
    info = DocumentFileInfo(
        file_name=path.name,
        size=path.stat().st_size,
        media_type=document_type.media_type,
        download_url=f"/api/documents/{segment}/download/{path.name}",
    )
    return info.model_dump(by_alias=True)
