"""
Document ingestion handler.

Turns an ExtractedData payload into a Document plus classified emission records.
"""

import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select
from typing import List, Tuple

from mrv.core.errors import ExtractionError
from mrv.engine.classifier import classify
from mrv.handlers.audit import record_audit
from mrv.models.document import Document, ExtractedData, LineItem
from mrv.models.emission import EmissionRecord
from mrv.models.enums import ClassificationMethod, DataQuality
from mrv.models.subject import Subject
from mrv.utils.hashing import hash_payload

logger = logging.getLogger(__name__)

HIGH_QUALITY_CONFIDENCE = 0.85
MEDIUM_QUALITY_CONFIDENCE = 0.6


def quality_for_confidence(confidence: float) -> DataQuality:
    """Data quality label implied by extraction confidence."""
    if confidence >= HIGH_QUALITY_CONFIDENCE:
        return DataQuality.HIGH
    if confidence >= MEDIUM_QUALITY_CONFIDENCE:
        return DataQuality.MEDIUM
    return DataQuality.LOW


def _line_item_record(item: LineItem, extracted: ExtractedData) -> EmissionRecord:
    classification = classify(
        product_category=item.product_category,
        emission_category=item.emission_category or extracted.emission_category,
        line_item_scope=item.scope,
        hsn_code=item.hsn_code,
    )
    co2_kg = item.co2_kg or 0.0
    if co2_kg < 0:
        logger.warning(f"Negative CO2 on line item '{item.description}' clamped to 0")
        co2_kg = 0.0

    return EmissionRecord(
        scope=classification.scope,
        category=classification.category,
        co2_kg=co2_kg,
        activity_data=item.quantity,
        activity_unit=item.unit,
        emission_factor=item.emission_factor,
        factor_source=item.factor_source,
        data_quality=quality_for_confidence(extracted.confidence),
        classification_method=item.classification_method,
        confidence=extracted.confidence,
        scope_conflict=classification.scope_conflict,
    )


def _document_level_record(extracted: ExtractedData) -> EmissionRecord:
    classification = classify(
        product_category=extracted.primary_category,
        emission_category=extracted.emission_category,
        line_item_scope=extracted.primary_scope,
    )
    return EmissionRecord(
        scope=classification.scope,
        category=classification.category,
        co2_kg=extracted.resolved_total_co2_kg(),
        activity_data=extracted.activity_data,
        activity_unit=extracted.activity_unit,
        emission_factor=extracted.emission_factor,
        data_quality=quality_for_confidence(extracted.confidence),
        classification_method=ClassificationMethod.UNVERIFIABLE,
        confidence=extracted.confidence,
        scope_conflict=classification.scope_conflict,
    )


def build_records(extracted: ExtractedData) -> List[EmissionRecord]:
    """
    Classify an extraction into unsaved emission records.

    Line items each become one record. A document with no line items but a
    document-level total (totalCO2Kg, then estimatedCO2Kg) becomes a single
    unverifiable record.
    """
    if extracted.line_items:
        return [_line_item_record(item, extracted) for item in extracted.line_items]
    if extracted.resolved_total_co2_kg() > 0:
        return [_document_level_record(extracted)]
    return []


async def ingest_document(
    session: AsyncSession,
    extracted: ExtractedData,
    subject: Subject,
) -> Tuple[Document, List[EmissionRecord]]:
    """
    Persist an extracted document and its emission records in one commit.

    Raises:
        ExtractionError: if the extractor reported an error for this document
    """
    if extracted.error:
        logger.warning(f"Extraction failed for {subject.key}: {extracted.error}")
        raise ExtractionError(extracted.error)

    payload = extracted.model_dump(mode="json", by_alias=True)
    records = build_records(extracted)
    records_total = sum(r.co2_kg for r in records)

    document = Document(
        document_type=extracted.document_type,
        vendor=extracted.vendor,
        invoice_number=extracted.invoice_number,
        amount=extracted.amount,
        currency=extracted.currency,
        confidence=extracted.confidence,
        total_co2_kg=extracted.resolved_total_co2_kg() or records_total,
        line_item_count=len(extracted.line_items),
        classification_status=extracted.classification_status,
        payload_hash=hash_payload(payload),
        **subject.owner_fields(),
    )
    session.add(document)
    await session.flush()

    for record in records:
        record.document_id = document.id
        for field, value in subject.owner_fields().items():
            setattr(record, field, value)
        session.add(record)

    record_audit(
        session,
        action="document_ingested",
        entity_type="document",
        payload=payload,
        entity_id=document.id,
        subject_id=subject.key,
        extra_data={"records": len(records), "total_co2_kg": records_total},
    )
    await session.commit()

    await session.refresh(document)
    for record in records:
        await session.refresh(record)

    logger.info(
        f"Ingested document {document.id} for {subject.key}: "
        f"{len(records)} records, {records_total:.2f} kg CO2e"
    )
    return document, records


async def list_documents(session: AsyncSession, subject: Subject) -> List[Document]:
    """Documents owned by the subject, newest first."""
    statement = select(Document).where(subject.owns(Document)).order_by(
        Document.created_at.desc(), Document.id.desc()
    )
    result = await session.execute(statement)
    return list(result.scalars().all())
