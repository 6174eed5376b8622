"""
test_frameworks.py: framework applicability, overrides and disclaimer text
"""

import pytest

from mrv.engine.frameworks import (
    BASELINE_FRAMEWORK,
    FRAMEWORK_CATALOGUE,
    build_framework_report,
    determine_frameworks,
    framework_coverage,
    framework_disclaimer,
)
from mrv.models.contracts import AggregatedSummary
from mrv.models.organization import OrganizationProfileCreate


def profile(**fields):
    return OrganizationProfileCreate(**fields)


class TestDetermineFrameworks:

    def test_indian_steel_exporter(self):
        result = determine_frameworks(
            profile(country="IN", size="large", exports_to_eu=True, sector="steel")
        )
        assert result == [
            "GHG_PROTOCOL",
            "INDIA_CPCB",
            "INDIA_BRSR",
            "INDIA_CCTS",
            "CBAM",
            "CSRD_ESRS",
            "ISSB_S1",
            "ISSB_S2",
        ]

    def test_brsr_requires_large_size(self):
        assert "INDIA_BRSR" not in determine_frameworks(profile(country="IN", size="small"))
        assert "INDIA_BRSR" in determine_frameworks(profile(country="IN", size="large_listed"))

    def test_cbam_requires_covered_sector(self):
        result = determine_frameworks(profile(country="IN", exports_to_eu=True, sector="textiles"))
        assert "CBAM" not in result
        assert "CSRD_ESRS" in result

    def test_sector_aliases(self):
        result = determine_frameworks(profile(country="IN", exports_to_eu=True, sector="Aluminium"))
        assert "CBAM" in result

    def test_no_predicates_falls_back_to_baseline(self):
        assert determine_frameworks(profile(country="US")) == [BASELINE_FRAMEWORK]

    def test_finance_and_net_zero_frameworks(self):
        result = determine_frameworks(
            profile(country="US", seeking_finance=True, has_net_zero_target=True)
        )
        assert result == [
            "GHG_PROTOCOL", "GRI_305", "TCFD", "CDP", "SASB", "SBTI", "UN_SDGS", "TNFD",
        ]

    def test_output_is_deterministic(self):
        p = profile(country="IN", size="large", exports_to_eu=True, sector="cement")
        assert determine_frameworks(p) == determine_frameworks(p)


class TestOverride:

    def test_override_replaces_detected_set(self):
        p = profile(country="IN", exports_to_eu=True, sector="steel")
        assert determine_frameworks(p, override=["cdp", "GHG_PROTOCOL"]) == ["GHG_PROTOCOL", "CDP"]

    def test_override_does_not_change_applicability(self):
        p = profile(country="IN", exports_to_eu=True, sector="steel")
        before = determine_frameworks(p)
        determine_frameworks(p, override=["CDP"])
        assert determine_frameworks(p) == before

    def test_unknown_override_rejected(self):
        with pytest.raises(ValueError, match="BOGUS"):
            determine_frameworks(profile(), override=["BOGUS"])

    def test_empty_override_means_auto(self):
        assert determine_frameworks(profile(country="US"), override=[]) == [BASELINE_FRAMEWORK]


class TestDisclaimer:

    def test_names_follow_catalogue_order(self):
        text = framework_disclaimer(["CBAM", "GHG_PROTOCOL"])
        assert text.startswith(
            "This report provides decision-support disclosures aligned with GHG Protocol, CBAM."
        )
        assert "not a statutory filing unless independently assured" in text
        assert "IND_EF_2025" in text

    def test_full_text_uses_short_names(self):
        assert framework_disclaimer(["GRI_305", "CSRD_ESRS"]) == (
            "This report provides decision-support disclosures aligned with CSRD/ESRS, GRI. "
            "It is not a statutory filing unless independently assured. "
            "Data is calculated using the BIOCOG MRV India v1.0 methodology with emission "
            "factors from IND_EF_2025. Scope boundaries, data quality assumptions, and "
            "methodology limitations are detailed in the methodology section."
        )

    def test_empty_set_wording(self):
        assert "aligned with standard GHG accounting." in framework_disclaimer([])

    def test_same_set_same_text(self):
        assert framework_disclaimer(["CDP", "TCFD"]) == framework_disclaimer(["TCFD", "CDP"])


class TestCoverage:

    def test_coverage_split(self):
        summary = AggregatedSummary(scope1=10.0, total=10.0)
        coverage = framework_coverage(["CDP", "GHG_PROTOCOL", "CBAM", "TCFD", "TNFD"], summary)
        assert coverage.covered == ["GHG_PROTOCOL", "CBAM", "CDP"]
        assert coverage.partial == ["TCFD"]
        assert coverage.not_covered == ["TNFD"]

    def test_any_scope_counts_as_data(self):
        summary = AggregatedSummary(scope3=4.0, total=4.0)
        assert framework_coverage(["ISSB_S2", "UN_SDGS"], summary).covered == ["ISSB_S2", "UN_SDGS"]

    @pytest.mark.parametrize("summary", [None, AggregatedSummary()])
    def test_no_data_downgrades_covered_to_partial(self, summary):
        coverage = framework_coverage(["GHG_PROTOCOL", "SBTI", "TNFD"], summary)
        assert coverage.covered == []
        assert coverage.partial == ["GHG_PROTOCOL", "SBTI"]
        assert coverage.not_covered == ["TNFD"]

    def test_catalogue_statuses(self):
        statuses = {fid: fw.coverage for fid, fw in FRAMEWORK_CATALOGUE.items()}
        assert set(statuses.values()) == {"covered", "partial", "not_applicable"}
        assert [fid for fid, s in statuses.items() if s == "partial"] == [
            "INDIA_BRSR", "CSRD_ESRS", "ISSB_S1", "TCFD", "SASB", "SBTI",
        ]

    def test_report(self):
        report = build_framework_report(profile(country="IN"), override=["GHG_PROTOCOL"])
        assert report.frameworks == ["GHG_PROTOCOL"]
        assert report.framework_names == [FRAMEWORK_CATALOGUE["GHG_PROTOCOL"].name]
        assert report.override_applied is True
        assert report.coverage is None
