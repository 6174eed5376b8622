"""
Emission record endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from mrv.core.database import get_session
from mrv.handlers.emissions import get_emission_summary, list_emissions
from mrv.models.contracts import AggregatedSummary
from mrv.models.emission import EmissionRecordRead
from mrv.models.subject import Subject
from mrv.routes.deps import get_subject

router = APIRouter(prefix="/emissions", tags=["emissions"])


@router.get("/", response_model=List[EmissionRecordRead])
async def list_emissions_endpoint(
    subject: Subject = Depends(get_subject),
    session: AsyncSession = Depends(get_session)
):
    """List the subject's emission records."""
    return await list_emissions(session, subject)


@router.get("/summary", response_model=AggregatedSummary)
async def emission_summary_endpoint(
    subject: Subject = Depends(get_subject),
    session: AsyncSession = Depends(get_session)
):
    """Scope totals, category totals and the trailing six-month trend."""
    return await get_emission_summary(session, subject)
