"""
Plan tiers and their feature capabilities.

Each tier is a closed enum member; the capability table is checked for
exhaustiveness at import time so adding a tier or feature without filling in
the table fails immediately.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet


class Tier(str, Enum):
    """Subscription tier."""
    SNAPSHOT = "snapshot"
    BASIC = "basic"
    PRO = "pro"
    SCALE = "scale"


class Feature(str, Enum):
    """Product capability; every member gates at least one route."""
    VERIFICATION = "verification"
    HISTORICAL_TRENDS = "historical_trends"
    FRAMEWORK_REPORTS = "framework_reports"
    CARBON_MONETIZATION = "carbon_monetization"


@dataclass(frozen=True)
class TierLimits:
    """Numeric limits for a tier."""
    invoice_scans: int
    backup_days: int
    team_members: int


TIER_CAPABILITIES: Dict[Tier, FrozenSet[Feature]] = {
    Tier.SNAPSHOT: frozenset({
        Feature.VERIFICATION,
    }),
    Tier.BASIC: frozenset({
        Feature.VERIFICATION,
        Feature.HISTORICAL_TRENDS,
        Feature.FRAMEWORK_REPORTS,
    }),
    Tier.PRO: frozenset({
        Feature.VERIFICATION,
        Feature.HISTORICAL_TRENDS,
        Feature.FRAMEWORK_REPORTS,
        Feature.CARBON_MONETIZATION,
    }),
    Tier.SCALE: frozenset(Feature),
}

TIER_LIMITS: Dict[Tier, TierLimits] = {
    Tier.SNAPSHOT: TierLimits(invoice_scans=10, backup_days=90, team_members=1),
    Tier.BASIC: TierLimits(invoice_scans=100, backup_days=365, team_members=3),
    Tier.PRO: TierLimits(invoice_scans=500, backup_days=730, team_members=10),
    Tier.SCALE: TierLimits(invoice_scans=10000, backup_days=1825, team_members=999),
}

_missing = set(Tier) - set(TIER_CAPABILITIES) | set(Tier) - set(TIER_LIMITS)
if _missing:
    raise RuntimeError(f"Tier table incomplete for: {sorted(t.value for t in _missing)}")


def can_access(tier: Tier, feature: Feature) -> bool:
    """Return True if the tier includes the feature."""
    return feature in TIER_CAPABILITIES[tier]


def tier_limits(tier: Tier) -> TierLimits:
    return TIER_LIMITS[tier]
