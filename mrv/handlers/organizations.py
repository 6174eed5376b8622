"""
Organization profile handlers.
"""

import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from mrv.core.errors import SubjectNotFoundError
from mrv.models.organization import OrganizationProfile, OrganizationProfileCreate
from mrv.utils.time import utc_now

logger = logging.getLogger(__name__)


async def get_profile(session: AsyncSession, user_id: str) -> OrganizationProfile:
    result = await session.execute(
        select(OrganizationProfile).where(OrganizationProfile.user_id == user_id)
    )
    profile = result.scalars().first()
    if not profile:
        raise SubjectNotFoundError(f"Organization profile not found for user {user_id}")
    return profile


async def upsert_profile(
    session: AsyncSession,
    user_id: str,
    data: OrganizationProfileCreate,
) -> OrganizationProfile:
    """Create the user's profile or replace every field of the existing one."""
    try:
        profile = await get_profile(session, user_id)
    except SubjectNotFoundError:
        profile = OrganizationProfile(user_id=user_id)
        session.add(profile)

    for field, value in data.model_dump().items():
        setattr(profile, field, value)
    profile.updated_at = utc_now()

    await session.commit()
    await session.refresh(profile)
    logger.info(f"Organization profile saved for user {user_id}")
    return profile
