"""
Compliance framework applicability for an organization profile.

Each framework carries its own predicate over the profile. Output order is
catalogue order, so the same profile always yields the same list and the same
disclaimer text.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional

from mrv.models.contracts import AggregatedSummary, FrameworkCoverage, FrameworkReport
from mrv.models.enums import OrganizationSize

BASELINE_FRAMEWORK = "GHG_PROTOCOL"

CBAM_SECTORS = frozenset({"steel", "aluminum", "cement", "fertilizer", "hydrogen", "electricity"})
CCTS_SECTORS = frozenset({
    "steel", "aluminum", "cement", "fertilizer", "petrochemicals", "petroleum_refining",
    "pulp_and_paper", "textiles", "chlor_alkali",
})
SECTOR_ALIASES = {
    "aluminium": "aluminum",
    "iron_and_steel": "steel",
    "iron & steel": "steel",
    "fertiliser": "fertilizer",
    "fertilizers": "fertilizer",
    "power": "electricity",
    "paper": "pulp_and_paper",
    "refinery": "petroleum_refining",
}
LARGE_SIZES = frozenset({OrganizationSize.LARGE, OrganizationSize.LARGE_LISTED})


def normalise_sector(sector: Optional[str]) -> Optional[str]:
    if not sector:
        return None
    text = str(sector).strip().lower()
    return SECTOR_ALIASES.get(text, text).replace(" ", "_")


def _country(profile) -> str:
    return str(profile.country or "").strip().upper()


def _size(profile) -> Optional[OrganizationSize]:
    try:
        return OrganizationSize(profile.size)
    except ValueError:
        return None


@dataclass(frozen=True)
class Framework:
    id: str
    name: str
    short_name: str
    category: str  # "baseline", "mandatory", "voluntary", "investor"
    applies: Callable[[object], bool]
    # "covered", "partial" or "not_applicable"
    coverage: str = "partial"


FRAMEWORK_CATALOGUE: Dict[str, Framework] = {
    f.id: f
    for f in [
        Framework(
            "GHG_PROTOCOL", "GHG Protocol Corporate Standard", "GHG Protocol", "baseline",
            lambda p: True, coverage="covered",
        ),
        Framework(
            "INDIA_CPCB", "Central Pollution Control Board Environmental Reporting", "CPCB", "mandatory",
            lambda p: _country(p) == "IN", coverage="covered",
        ),
        Framework(
            "INDIA_BRSR", "SEBI Business Responsibility and Sustainability Report", "BRSR", "mandatory",
            lambda p: _country(p) == "IN" and _size(p) in LARGE_SIZES,
        ),
        Framework(
            "INDIA_CCTS", "India Carbon Credit Trading Scheme", "CCTS", "mandatory",
            lambda p: _country(p) == "IN" and normalise_sector(p.sector) in CCTS_SECTORS,
            coverage="covered",
        ),
        Framework(
            "CBAM", "EU Carbon Border Adjustment Mechanism", "CBAM", "mandatory",
            lambda p: bool(p.exports_to_eu) and normalise_sector(p.sector) in CBAM_SECTORS,
            coverage="covered",
        ),
        Framework(
            "CSRD_ESRS", "EU CSRD / European Sustainability Reporting Standards", "CSRD/ESRS", "mandatory",
            lambda p: bool(p.exports_to_eu),
        ),
        Framework(
            "ISSB_S1", "IFRS S1 General Sustainability Disclosures", "ISSB S1", "investor",
            lambda p: bool(p.exports_to_eu),
        ),
        Framework(
            "ISSB_S2", "IFRS S2 Climate-related Disclosures", "ISSB S2", "investor",
            lambda p: bool(p.exports_to_eu), coverage="covered",
        ),
        Framework(
            "GRI_305", "GRI 305: Emissions", "GRI", "voluntary",
            lambda p: bool(p.seeking_finance), coverage="covered",
        ),
        Framework(
            "TCFD", "Task Force on Climate-related Financial Disclosures", "TCFD", "investor",
            lambda p: bool(p.seeking_finance),
        ),
        Framework(
            "CDP", "CDP Climate Change Questionnaire", "CDP", "investor",
            lambda p: bool(p.seeking_finance), coverage="covered",
        ),
        Framework(
            "SASB", "SASB Standards", "SASB", "investor",
            lambda p: bool(p.seeking_finance),
        ),
        Framework(
            "SBTI", "Science Based Targets initiative", "SBTi", "voluntary",
            lambda p: bool(p.has_net_zero_target),
        ),
        Framework(
            "UN_SDGS", "UN Sustainable Development Goals", "UN SDGs", "voluntary",
            lambda p: bool(p.has_net_zero_target), coverage="covered",
        ),
        Framework(
            "TNFD", "Taskforce on Nature-related Financial Disclosures", "TNFD", "voluntary",
            lambda p: bool(p.has_net_zero_target), coverage="not_applicable",
        ),
    ]
}


def _ordered(ids: Iterable[str]) -> List[str]:
    wanted = set(ids)
    return [fid for fid in FRAMEWORK_CATALOGUE if fid in wanted]


def determine_frameworks(profile, override: Optional[Iterable[str]] = None) -> List[str]:
    """
    Return applicable framework ids in catalogue order.

    A non-empty `override` replaces the detected set for this call only.
    The result is never empty; GHG Protocol is the fallback.

    Raises:
        ValueError: if the override names an unknown framework
    """
    if override:
        requested = [str(fid).strip().upper() for fid in override if str(fid).strip()]
        unknown = sorted(set(requested) - set(FRAMEWORK_CATALOGUE))
        if unknown:
            raise ValueError(f"Unknown framework(s): {', '.join(unknown)}")
        selected = _ordered(requested)
    else:
        selected = [fid for fid, fw in FRAMEWORK_CATALOGUE.items() if fw.applies(profile)]
    return selected or [BASELINE_FRAMEWORK]


def framework_disclaimer(framework_ids: Iterable[str]) -> str:
    """Verbatim legal disclaimer for a framework set."""
    names = [FRAMEWORK_CATALOGUE[fid].short_name for fid in _ordered(framework_ids)]
    aligned = ", ".join(names) if names else "standard GHG accounting"
    return (
        f"This report provides decision-support disclosures aligned with {aligned}. "
        "It is not a statutory filing unless independently assured. "
        "Data is calculated using the BIOCOG MRV India v1.0 methodology with emission "
        "factors from IND_EF_2025. Scope boundaries, data quality assumptions, and "
        "methodology limitations are detailed in the methodology section."
    )


def framework_coverage(
    framework_ids: Iterable[str],
    summary: Optional[AggregatedSummary] = None,
) -> FrameworkCoverage:
    """
    Split frameworks by how completely the verification outputs cover them.

    A framework the outputs fully serve is covered once any scope has emissions
    and drops to partial while nothing is recorded. Partial frameworks stay
    partial; not-applicable ones are never covered.
    """
    summary = summary or AggregatedSummary()
    has_scope_data = summary.scope1 > 0 or summary.scope2 > 0 or summary.scope3 > 0
    coverage = FrameworkCoverage()
    for fid in _ordered(framework_ids):
        status = FRAMEWORK_CATALOGUE[fid].coverage
        if status == "covered" and has_scope_data:
            coverage.covered.append(fid)
        elif status == "partial" or (status == "covered" and summary.total == 0):
            coverage.partial.append(fid)
        else:
            coverage.not_covered.append(fid)
    return coverage


def build_framework_report(
    profile,
    override: Optional[Iterable[str]] = None,
    summary: Optional[AggregatedSummary] = None,
) -> FrameworkReport:
    frameworks = determine_frameworks(profile, override)
    return FrameworkReport(
        frameworks=frameworks,
        framework_names=[FRAMEWORK_CATALOGUE[fid].name for fid in frameworks],
        disclaimer=framework_disclaimer(frameworks),
        override_applied=bool(override),
        coverage=framework_coverage(frameworks, summary) if summary is not None else None,
    )
