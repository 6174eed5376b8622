"""
test_tiers.py: plan tier capability table
"""

from fastapi.routing import APIRoute

from main import app
from mrv.core.tiers import TIER_CAPABILITIES, TIER_LIMITS, Feature, Tier, can_access, tier_limits

TIER_ORDER = [Tier.SNAPSHOT, Tier.BASIC, Tier.PRO, Tier.SCALE]


class TestTiers:

    def test_table_is_exhaustive(self):
        assert set(TIER_CAPABILITIES) == set(Tier)
        assert set(TIER_LIMITS) == set(Tier)

    def test_higher_tiers_include_lower_tiers(self):
        for lower, higher in zip(TIER_ORDER, TIER_ORDER[1:]):
            assert TIER_CAPABILITIES[lower] <= TIER_CAPABILITIES[higher]
            assert tier_limits(lower).invoice_scans < tier_limits(higher).invoice_scans

    def test_monetization_gate(self):
        assert can_access(Tier.PRO, Feature.CARBON_MONETIZATION)
        assert not can_access(Tier.SNAPSHOT, Feature.CARBON_MONETIZATION)
        assert not can_access(Tier.BASIC, Feature.CARBON_MONETIZATION)

    def test_scale_has_everything(self):
        assert all(can_access(Tier.SCALE, feature) for feature in Feature)

    def test_snapshot_limits(self):
        limits = tier_limits(Tier.SNAPSHOT)
        assert (limits.invoice_scans, limits.backup_days, limits.team_members) == (10, 90, 1)

    def test_reporting_gates(self):
        for feature in (Feature.HISTORICAL_TRENDS, Feature.FRAMEWORK_REPORTS):
            assert not can_access(Tier.SNAPSHOT, feature)
            assert can_access(Tier.BASIC, feature)
        assert can_access(Tier.SNAPSHOT, Feature.VERIFICATION)

    def test_every_feature_gates_a_route(self):
        gated = {
            getattr(dependency.call, "feature", None)
            for route in app.routes if isinstance(route, APIRoute)
            for dependency in route.dependant.dependencies
        }
        assert set(Feature) <= gated
