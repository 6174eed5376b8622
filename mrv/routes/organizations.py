"""
Organization profile and compliance framework endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from mrv.core.database import get_session
from mrv.core.errors import SubjectNotFoundError
from mrv.core.tiers import Feature
from mrv.engine.frameworks import build_framework_report
from mrv.handlers.organizations import get_profile, upsert_profile
from mrv.handlers.reports import get_framework_report
from mrv.models.contracts import FrameworkReport
from mrv.models.organization import OrganizationProfileCreate, OrganizationProfileRead
from mrv.routes.deps import require_feature

router = APIRouter(prefix="/organizations", tags=["organizations"])


@router.put("/profile", response_model=OrganizationProfileRead)
async def upsert_profile_endpoint(
    profile: OrganizationProfileCreate,
    user_id: str = Query(..., min_length=1),
    session: AsyncSession = Depends(get_session)
):
    """Create or replace the user's organization profile."""
    return await upsert_profile(session, user_id, profile)


@router.get("/profile", response_model=OrganizationProfileRead)
async def get_profile_endpoint(
    user_id: str = Query(..., min_length=1),
    session: AsyncSession = Depends(get_session)
):
    """Get the user's organization profile."""
    try:
        return await get_profile(session, user_id)
    except SubjectNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )


@router.get(
    "/profile/frameworks",
    response_model=FrameworkReport,
    dependencies=[Depends(require_feature(Feature.FRAMEWORK_REPORTS))],
)
async def profile_frameworks_endpoint(
    user_id: str = Query(..., min_length=1),
    override: Optional[List[str]] = Query(default=None),
    session: AsyncSession = Depends(get_session)
):
    """
    Applicable frameworks for the stored profile with the verbatim disclaimer.
    Passing `override` replaces the detected set for this report only.
    """
    try:
        return await get_framework_report(session, user_id, override)
    except SubjectNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )


@router.post(
    "/frameworks",
    response_model=FrameworkReport,
    dependencies=[Depends(require_feature(Feature.FRAMEWORK_REPORTS))],
)
async def frameworks_endpoint(
    profile: OrganizationProfileCreate,
    override: Optional[List[str]] = Query(default=None)
):
    """Stateless framework mapping for an ad-hoc profile."""
    try:
        return build_framework_report(profile, override=override)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
