"""
Verification endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from mrv.core.database import get_session
from mrv.core.errors import AlreadyVerifiedError, MonetizationError, SubjectNotFoundError
from mrv.core.tiers import Feature
from mrv.handlers.reports import get_history_summary
from mrv.handlers.verification import (
    create_verification,
    get_monetization,
    get_verification,
    list_verifications,
)
from mrv.models.contracts import HistoricalSummary, MonetizationReport
from mrv.models.subject import Subject
from mrv.models.verification import VerificationReport, VerificationRequest
from mrv.routes.deps import get_subject, require_feature

router = APIRouter(prefix="/verifications", tags=["verifications"])


@router.post(
    "/",
    response_model=VerificationReport,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_feature(Feature.VERIFICATION))],
)
async def create_verification_endpoint(
    request: Optional[VerificationRequest] = None,
    subject: Subject = Depends(get_subject),
    session: AsyncSession = Depends(get_session)
):
    """
    Score the subject's unverified emission records and append a verification run.
    Records already credited by a verified run are never scored again.

    Status bands:
    - score >= 0.8 → verified
    - score >= 0.5 → needs_review
    - otherwise → rejected
    - no records → no_data
    """
    try:
        run = await create_verification(session, subject, request)
    except SubjectNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except AlreadyVerifiedError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e)
        )
    return VerificationReport.from_run(run)


@router.get("/", response_model=List[VerificationReport])
async def list_verifications_endpoint(
    subject: Subject = Depends(get_subject),
    session: AsyncSession = Depends(get_session)
):
    """List the subject's verification runs, newest first."""
    runs = await list_verifications(session, subject)
    return [VerificationReport.from_run(run) for run in runs]


@router.get(
    "/history",
    response_model=HistoricalSummary,
    dependencies=[Depends(require_feature(Feature.HISTORICAL_TRENDS))],
)
async def verification_history_endpoint(
    subject: Subject = Depends(get_subject),
    session: AsyncSession = Depends(get_session)
):
    """CO2e-weighted roll-up of all runs with trend and accumulated credits."""
    return await get_history_summary(session, subject)


@router.get("/{run_id}", response_model=VerificationReport)
async def get_verification_endpoint(
    run_id: int,
    subject: Subject = Depends(get_subject),
    session: AsyncSession = Depends(get_session)
):
    """Get one verification run."""
    try:
        run = await get_verification(session, run_id, subject)
    except SubjectNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    return VerificationReport.from_run(run)


@router.post(
    "/{run_id}/monetization",
    response_model=MonetizationReport,
    dependencies=[Depends(require_feature(Feature.CARBON_MONETIZATION))],
)
async def monetization_endpoint(
    run_id: int,
    subject: Subject = Depends(get_subject),
    session: AsyncSession = Depends(get_session)
):
    """Carbon credit, green loan and incentive pathways for a verified run."""
    try:
        return await get_monetization(session, run_id, subject)
    except SubjectNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except MonetizationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
