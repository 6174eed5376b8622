"""
Shared FastAPI dependencies: subject resolution and plan-tier gating.
"""

from fastapi import Header, HTTPException, Query, status
from typing import Optional

from mrv.core.tiers import Feature, Tier, can_access
from mrv.models.subject import Subject


async def get_subject(
    user_id: Optional[str] = Query(default=None),
    session_id: Optional[str] = Query(default=None),
) -> Subject:
    """Resolve the record owner from `user_id` or `session_id` (user wins when both are sent)."""
    try:
        return Subject(user_id=user_id or None, session_id=None if user_id else session_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


async def get_tier(x_plan_tier: Optional[str] = Header(default=None)) -> Tier:
    if not x_plan_tier:
        return Tier.SNAPSHOT
    try:
        return Tier(x_plan_tier.strip().lower())
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown plan tier: {x_plan_tier}"
        )


def require_feature(feature: Feature):
    """Dependency factory rejecting requests whose tier lacks `feature`."""
    async def _check(x_plan_tier: Optional[str] = Header(default=None)) -> Tier:
        tier = await get_tier(x_plan_tier)
        if not can_access(tier, feature):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Plan '{tier.value}' does not include {feature.value}"
            )
        return tier
    _check.feature = feature
    return _check
