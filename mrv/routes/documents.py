"""
Document ingestion endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel
from typing import List

from mrv.core.database import get_session
from mrv.core.errors import ExtractionError
from mrv.handlers.ingestion import ingest_document, list_documents
from mrv.models.document import DocumentRead, ExtractedData
from mrv.models.emission import EmissionRecordRead
from mrv.models.subject import Subject
from mrv.routes.deps import get_subject

router = APIRouter(prefix="/documents", tags=["documents"])


class DocumentIngestResponse(SQLModel):
    document: DocumentRead
    emissions: List[EmissionRecordRead]


@router.post("/", response_model=DocumentIngestResponse, status_code=status.HTTP_201_CREATED)
async def ingest_document_endpoint(
    extracted: ExtractedData,
    subject: Subject = Depends(get_subject),
    session: AsyncSession = Depends(get_session)
):
    """
    Ingest an ExtractedData payload from the extraction service.
    Classifies each line item into an emission record.
    """
    try:
        document, records = await ingest_document(session, extracted, subject)
    except ExtractionError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Extraction failed: {e}"
        )
    return DocumentIngestResponse(
        document=DocumentRead.model_validate(document),
        emissions=[EmissionRecordRead.model_validate(r) for r in records],
    )


@router.get("/", response_model=List[DocumentRead])
async def list_documents_endpoint(
    subject: Subject = Depends(get_subject),
    session: AsyncSession = Depends(get_session)
):
    """List the subject's documents, newest first."""
    return await list_documents(session, subject)
