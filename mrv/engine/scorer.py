"""
scorer.py
Deterministic verification scoring for a batch of emission records.

score = 0.40 * mean confidence + 0.35 * mean methodology + 0.25 * mean provenance

No remote or model call happens here. Any externally derived signal (an AI
green score, an IoT metering flag) is passed in as an argument.
"""

import logging
import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from mrv.core.constants import (
    ABNORMAL_ACTIVITY_THRESHOLD,
    CONFIDENCE_WEIGHT,
    DOMINANT_SCOPE_SHARE,
    GREEN_SCORE_MAX_REDUCTION_BONUS,
    GREEN_SCORE_SCOPE_PENALTY,
    IOT_REDUCTION_RATE,
    LOW_CONFIDENCE_THRESHOLD,
    METHOD_WEIGHTS,
    METHODOLOGY_WEIGHT,
    PROVENANCE_WEIGHT,
    QUALITY_CONFIDENCE,
    REVIEW_SCORE_THRESHOLD,
    UNVERIFIABLE_SHARE_THRESHOLD,
    VERIFIED_SCORE_THRESHOLD,
)
from mrv.engine.credits import compute_credit_eligibility
from mrv.models.enums import (
    ClassificationMethod,
    DataQuality,
    GreenwashingRisk,
    QualityGrade,
    VerificationStatus,
)
from mrv.models.verification import VerificationRunCreate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoringThresholds:
    """Status bands; `verified` must not be below `review`."""
    verified: float = VERIFIED_SCORE_THRESHOLD
    review: float = REVIEW_SCORE_THRESHOLD

    def __post_init__(self):
        if not 0.0 <= self.review <= self.verified <= 1.0:
            raise ValueError(
                f"Invalid score bands: review={self.review}, verified={self.verified}"
            )

    @classmethod
    def from_settings(cls, settings) -> "ScoringThresholds":
        return cls(
            verified=settings.verified_score_threshold,
            review=settings.review_score_threshold,
        )


@dataclass
class RedFlag:
    code: str
    label: str
    description: str
    severity: str  # "high", "medium", "low"
    recommendation: str


# Catalogue order is the order flags and recommendations are reported in
FLAG_CATALOGUE = {
    "NO_RECORDS": RedFlag(
        code="NO_RECORDS",
        label="No emission records",
        description="Nothing to verify for this subject.",
        severity="low",
        recommendation="Upload fuel, electricity or purchase invoices to start verification.",
    ),
    "MISSING_ACTIVITY_DATA": RedFlag(
        code="MISSING_ACTIVITY_DATA",
        label="Missing activity data",
        description="One or more records have no activity quantity.",
        severity="medium",
        recommendation="Add the consumed quantity (litres, kWh, kg) for each line item.",
    ),
    "MISSING_ACTIVITY_UNIT": RedFlag(
        code="MISSING_ACTIVITY_UNIT",
        label="Missing activity unit",
        description="One or more records have no unit for their activity data.",
        severity="low",
        recommendation="Record the unit of measure alongside every quantity.",
    ),
    "EMISSION_FACTOR_NOT_CITED": RedFlag(
        code="EMISSION_FACTOR_NOT_CITED",
        label="Emission factor source not cited",
        description="One or more records have no emission factor.",
        severity="medium",
        recommendation="Cite the emission factor and its source dataset for each record.",
    ),
    "LOW_CONFIDENCE": RedFlag(
        code="LOW_CONFIDENCE",
        label="Confidence below 0.5",
        description="Extraction confidence is below 0.5 for one or more records.",
        severity="medium",
        recommendation="Re-upload a clearer copy of low-confidence documents or confirm values manually.",
    ),
    "ABNORMAL_QUANTITY": RedFlag(
        code="ABNORMAL_QUANTITY",
        label="Abnormal activity quantity",
        description="Activity data exceeds 1,000,000 units on a single record.",
        severity="medium",
        recommendation="Check unusually large quantities for unit or decimal errors.",
    ),
    "UNVERIFIABLE_CLASSIFICATION": RedFlag(
        code="UNVERIFIABLE_CLASSIFICATION",
        label="Unverifiable classification",
        description="One or more records could not be matched by HSN code or keyword.",
        severity="low",
        recommendation="Add HSN codes to invoices so line items can be classified exactly.",
    ),
    "UNVERIFIABLE_MATERIAL": RedFlag(
        code="UNVERIFIABLE_MATERIAL",
        label="Unverifiable record exceeds 20% of total CO2e",
        description="A single unverifiable record carries more than 20% of reported emissions.",
        severity="high",
        recommendation="Substantiate the largest unverifiable records with supporting documents.",
    ),
    "MISSING_BASELINE": RedFlag(
        code="MISSING_BASELINE",
        label="Missing baseline",
        description="A reduction is claimed without a documented baseline.",
        severity="high",
        recommendation="Document a baseline period before claiming emission reductions.",
    ),
    "SCOPE_CONFLICT": RedFlag(
        code="SCOPE_CONFLICT",
        label="Conflicting scope signals",
        description="A line-item scope disagrees with its category's default scope.",
        severity="low",
        recommendation="Review line items whose stated scope differs from their category.",
    ),
}

SCOPE_TIPS = {
    1: "Scope 1 dominates: evaluate fuel switching to CNG, biomass or electrified equipment.",
    2: "Scope 2 dominates: consider renewable energy certificates (RECs) or a green power purchase agreement.",
    3: "Scope 3 dominates: engage key suppliers for product-level emission data.",
}

_QUALITY_ORDER = [DataQuality.HIGH, DataQuality.MEDIUM, DataQuality.LOW]


def _as_quality(value) -> DataQuality:
    try:
        return DataQuality(value)
    except ValueError:
        return DataQuality.LOW


def _as_method(value) -> ClassificationMethod:
    try:
        return ClassificationMethod(value)
    except ValueError:
        return ClassificationMethod.UNVERIFIABLE


def has_activity_data(record) -> bool:
    return record.activity_data is not None and record.activity_data > 0


def has_emission_factor(record) -> bool:
    return record.emission_factor is not None


def effective_quality(record) -> DataQuality:
    """Declared data quality, one level lower when provenance is incomplete."""
    quality = _as_quality(record.data_quality)
    if has_activity_data(record) and has_emission_factor(record):
        return quality
    index = min(_QUALITY_ORDER.index(quality) + 1, len(_QUALITY_ORDER) - 1)
    return _QUALITY_ORDER[index]


def record_confidence(record) -> float:
    """Record confidence, or the confidence implied by its effective data quality."""
    if record.confidence is not None:
        return min(max(float(record.confidence), 0.0), 1.0)
    return QUALITY_CONFIDENCE[effective_quality(record).value]


def provenance_fraction(record) -> float:
    return (int(has_activity_data(record)) + int(has_emission_factor(record))) / 2.0


def status_for_score(score: float, thresholds: ScoringThresholds) -> VerificationStatus:
    if score >= thresholds.verified:
        return VerificationStatus.VERIFIED
    if score >= thresholds.review:
        return VerificationStatus.NEEDS_REVIEW
    return VerificationStatus.REJECTED


def compute_green_score(
    scope1: float,
    scope2: float,
    scope3: float,
    reductions: float = 0.0,
) -> int:
    """
    Deterministic 0-100 green score from the scope mix.

    Direct emissions are penalised hardest; metered reductions earn a bonus
    capped at 30 points. An empty footprint scores 0.
    """
    total = scope1 + scope2 + scope3
    if total <= 0:
        return 0
    score = (
        100.0
        - (scope1 / total) * GREEN_SCORE_SCOPE_PENALTY[1]
        - (scope2 / total) * GREEN_SCORE_SCOPE_PENALTY[2]
        - (scope3 / total) * GREEN_SCORE_SCOPE_PENALTY[3]
        + min(reductions / total, GREEN_SCORE_MAX_REDUCTION_BONUS) * 100.0
    )
    return int(round(min(max(score, 0.0), 100.0)))


def _unverifiable_material(records: Sequence, total: float) -> bool:
    if total <= 0:
        return False
    return any(
        _as_method(r.classification_method) == ClassificationMethod.UNVERIFIABLE
        and r.co2_kg / total > UNVERIFIABLE_SHARE_THRESHOLD
        for r in records
    )


def assess_greenwashing_risk(
    records: Sequence,
    total: float,
    reduction_claimed: bool = False,
    baseline_documented: bool = False,
) -> GreenwashingRisk:
    """
    high: an unverifiable record carries >20% of CO2e, or a reduction is
    claimed without a baseline. medium: mixed methodology or incomplete
    provenance. low otherwise.
    """
    if _unverifiable_material(records, total):
        return GreenwashingRisk.HIGH
    if reduction_claimed and not baseline_documented:
        return GreenwashingRisk.HIGH
    methods = {_as_method(r.classification_method) for r in records}
    if len(methods) > 1:
        return GreenwashingRisk.MEDIUM
    if any(not has_emission_factor(r) or not has_activity_data(r) for r in records):
        return GreenwashingRisk.MEDIUM
    return GreenwashingRisk.LOW


def detect_flags(
    records: Sequence,
    total: float,
    reduction_claimed: bool = False,
    baseline_documented: bool = False,
) -> List[str]:
    """Return flag codes in catalogue order, each at most once."""
    raised = set()
    if not records:
        raised.add("NO_RECORDS")
    for r in records:
        if not has_activity_data(r):
            raised.add("MISSING_ACTIVITY_DATA")
        if not r.activity_unit:
            raised.add("MISSING_ACTIVITY_UNIT")
        if not has_emission_factor(r):
            raised.add("EMISSION_FACTOR_NOT_CITED")
        if record_confidence(r) < LOW_CONFIDENCE_THRESHOLD:
            raised.add("LOW_CONFIDENCE")
        if r.activity_data is not None and r.activity_data > ABNORMAL_ACTIVITY_THRESHOLD:
            raised.add("ABNORMAL_QUANTITY")
        if _as_method(r.classification_method) == ClassificationMethod.UNVERIFIABLE:
            raised.add("UNVERIFIABLE_CLASSIFICATION")
        if getattr(r, "scope_conflict", False):
            raised.add("SCOPE_CONFLICT")
    if _unverifiable_material(records, total):
        raised.add("UNVERIFIABLE_MATERIAL")
    if reduction_claimed and not baseline_documented:
        raised.add("MISSING_BASELINE")
    return [code for code in FLAG_CATALOGUE if code in raised]


def build_recommendations(flag_codes: Iterable[str], scope1: float, scope2: float, scope3: float) -> List[str]:
    """One next step per flag, then a tip for a scope holding more than half the total."""
    recommendations = [FLAG_CATALOGUE[code].recommendation for code in flag_codes]
    total = scope1 + scope2 + scope3
    if total > 0:
        for scope, value in ((1, scope1), (2, scope2), (3, scope3)):
            if value / total > DOMINANT_SCOPE_SHARE:
                recommendations.append(SCOPE_TIPS[scope])
                break
    return recommendations


def _run_quality(records: Sequence) -> DataQuality:
    ranks = [_QUALITY_ORDER.index(effective_quality(r)) for r in records]
    if not ranks:
        return DataQuality.LOW
    return _QUALITY_ORDER[int(round(sum(ranks) / len(ranks)))]


def score_records(
    records: Iterable,
    *,
    include_iot: bool = False,
    reduction_claimed: bool = False,
    baseline_documented: bool = False,
    green_score: Optional[int] = None,
    thresholds: Optional[ScoringThresholds] = None,
) -> VerificationRunCreate:
    """
    Score a batch of emission records into an unsaved verification run.

    Args:
        records: Emission records (anything exposing the EmissionRecord fields)
        include_iot: Apply the metered efficiency reduction to net emissions
        reduction_claimed: The submitter claims a reduction against a baseline
        baseline_documented: A baseline document backs the reduction claim
        green_score: Pre-computed external green score; replaces the formula
        thresholds: Status bands (defaults from constants)

    Returns:
        VerificationRunCreate; persistence is the caller's job
    """
    records = list(records)
    thresholds = thresholds or ScoringThresholds()

    scope_values = {1: [], 2: [], 3: []}
    for r in records:
        scope_values[r.scope if r.scope in scope_values else 3].append(max(r.co2_kg or 0.0, 0.0))
    scope1, scope2, scope3 = (math.fsum(scope_values[s]) for s in (1, 2, 3))
    total = scope1 + scope2 + scope3

    flag_codes = detect_flags(records, total, reduction_claimed, baseline_documented)
    flags = [FLAG_CATALOGUE[code].label for code in flag_codes]
    recommendations = build_recommendations(flag_codes, scope1, scope2, scope3)
    emission_ids = [r.id for r in records if getattr(r, "id", None) is not None]

    if not records:
        logger.info("Scoring skipped: no records")
        return VerificationRunCreate(
            status=VerificationStatus.NO_DATA,
            quality_grade=QualityGrade.D,
            include_iot=include_iot,
            reduction_claimed=reduction_claimed,
            baseline_documented=baseline_documented,
            green_score=_clamp_green(green_score) if green_score is not None else 0,
            flags=flags,
            recommendations=recommendations,
        )

    n = len(records)
    confidence = sum(record_confidence(r) for r in records) / n
    methodology = sum(METHOD_WEIGHTS[_as_method(r.classification_method).value] for r in records) / n
    provenance = sum(provenance_fraction(r) for r in records) / n
    score = round(
        CONFIDENCE_WEIGHT * confidence
        + METHODOLOGY_WEIGHT * methodology
        + PROVENANCE_WEIGHT * provenance,
        4,
    )
    status = status_for_score(score, thresholds)
    risk = assess_greenwashing_risk(records, total, reduction_claimed, baseline_documented)

    reductions = total * IOT_REDUCTION_RATE if include_iot else 0.0
    net = max(total - reductions, 0.0)
    credit = compute_credit_eligibility(total, score, status)

    if green_score is None:
        green = compute_green_score(scope1, scope2, scope3, reductions)
    else:
        green = _clamp_green(green_score)

    verified = status == VerificationStatus.VERIFIED
    logger.info(
        f"Scored {n} records: score={score:.4f} status={status.value} "
        f"risk={risk.value} grade={credit.quality_grade.value}"
    )

    return VerificationRunCreate(
        total_co2_kg=total,
        net_emissions_kg=net,
        verified_reductions_kg=reductions,
        score=score,
        status=status,
        greenwashing_risk=risk,
        data_quality=_run_quality(records),
        scope1_kg=scope1,
        scope2_kg=scope2,
        scope3_kg=scope3,
        green_score=green,
        eligible_credits=credit.eligible_credits,
        carry_forward=credit.carry_forward,
        quality_grade=credit.quality_grade,
        ccts_eligible=verified and credit.quality_grade != QualityGrade.D,
        cbam_compliant=(
            verified
            and risk == GreenwashingRisk.LOW
            and credit.quality_grade == QualityGrade.A
        ),
        include_iot=include_iot,
        reduction_claimed=reduction_claimed,
        baseline_documented=baseline_documented,
        flags=flags,
        recommendations=recommendations,
        emission_ids=emission_ids,
    )


def _clamp_green(value: int) -> int:
    return int(min(max(round(value), 0), 100))
