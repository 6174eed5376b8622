"""
Plan tier capability endpoint.
"""

from fastapi import APIRouter

from mrv.core.tiers import Tier, TIER_CAPABILITIES, tier_limits

router = APIRouter(prefix="/tiers", tags=["tiers"])


@router.get("/{tier}")
async def tier_capabilities(tier: Tier):
    """Features and limits included in a plan tier."""
    limits = tier_limits(tier)
    return {
        "tier": tier.value,
        "features": sorted(f.value for f in TIER_CAPABILITIES[tier]),
        "limits": {
            "invoice_scans": limits.invoice_scans,
            "backup_days": limits.backup_days,
            "team_members": limits.team_members,
        },
    }
