"""
Verification handler.

Scores a subject's emission records, appends a VerificationRun and flips the
`verified` flag on the scored records when the run verifies.
"""

import logging
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select
from typing import List, Optional

from mrv.core.config import get_settings
from mrv.core.errors import AlreadyVerifiedError, SubjectNotFoundError
from mrv.engine.monetization import calculate_monetization
from mrv.engine.scorer import ScoringThresholds, score_records
from mrv.handlers.audit import record_audit
from mrv.handlers.emissions import list_emissions
from mrv.models.contracts import MonetizationReport
from mrv.models.emission import EmissionRecord
from mrv.models.enums import VerificationStatus
from mrv.models.subject import Subject
from mrv.models.verification import VerificationRequest, VerificationRun

logger = logging.getLogger(__name__)


async def create_verification(
    session: AsyncSession,
    subject: Subject,
    request: Optional[VerificationRequest] = None,
    thresholds: Optional[ScoringThresholds] = None,
) -> VerificationRun:
    """
    Verify the subject's emission records and append the run.

    Verification logic:
    1. Load the subject's unverified records (or the requested subset)
    2. Score them with the deterministic scorer
    3. Insert a new VerificationRun; earlier runs are never touched
    4. If the run is verified, mark the scored records verified
    5. Write an audit entry in the same commit

    Args:
        session: Database session
        subject: Owner of the records
        request: Verification options
        thresholds: Status bands (defaults from settings)

    Returns:
        The stored VerificationRun

    Raises:
        SubjectNotFoundError: if a requested record is missing or not the subject's
        AlreadyVerifiedError: if a requested record was already verified
    """
    request = request or VerificationRequest()
    thresholds = thresholds or ScoringThresholds.from_settings(get_settings())

    if request.emission_ids is None:
        records = await list_emissions(session, subject, unverified_only=True)
    else:
        records = await list_emissions(session, subject, request.emission_ids)
        credited = sorted(r.id for r in records if r.verified)
        if credited:
            raise AlreadyVerifiedError(f"Emission records already verified: {credited}")

    result = score_records(
        records,
        include_iot=request.include_iot,
        reduction_claimed=request.reduction_claimed,
        baseline_documented=request.baseline_documented,
        green_score=request.green_score,
        thresholds=thresholds,
    )

    run = VerificationRun(**result.model_dump(), **subject.owner_fields())
    session.add(run)

    if result.status == VerificationStatus.VERIFIED and result.emission_ids:
        await session.execute(
            update(EmissionRecord)
            .where(EmissionRecord.id.in_(result.emission_ids))
            .values(verified=True)
        )

    await session.flush()
    record_audit(
        session,
        action="verification_created",
        entity_type="verification_run",
        payload={
            "emission_ids": result.emission_ids,
            "score": result.score,
            "status": result.status.value,
            "total_co2_kg": result.total_co2_kg,
        },
        entity_id=run.id,
        subject_id=subject.key,
    )
    await session.commit()
    await session.refresh(run)

    logger.info(
        f"Verification {run.id} for {subject.key}: {run.status.value} "
        f"(score {run.score:.4f}, {len(records)} records)"
    )
    return run


async def list_verifications(session: AsyncSession, subject: Subject) -> List[VerificationRun]:
    """Runs owned by the subject, newest first."""
    statement = select(VerificationRun).where(subject.owns(VerificationRun)).order_by(
        VerificationRun.created_at.desc(), VerificationRun.id.desc()
    )
    result = await session.execute(statement)
    return list(result.scalars().all())


async def get_verification(session: AsyncSession, run_id: int, subject: Subject) -> VerificationRun:
    """
    Raises:
        SubjectNotFoundError: if the run does not exist or belongs to another subject
    """
    run = await session.get(VerificationRun, run_id)
    if not run or not subject.matches(run):
        raise SubjectNotFoundError(f"Verification {run_id} not found")
    return run


async def get_monetization(session: AsyncSession, run_id: int, subject: Subject) -> MonetizationReport:
    run = await get_verification(session, run_id, subject)
    return calculate_monetization(run)
