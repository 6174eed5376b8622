"""
Carbon credit eligibility: whole-tonne issuance, carry-forward and quality grade.
"""

import math
from dataclasses import dataclass
from typing import Iterable

from mrv.core.constants import GRADE_THRESHOLDS, KG_PER_TONNE, TONNES_PER_CREDIT
from mrv.models.enums import QualityGrade, VerificationStatus
from mrv.models.verification import CreditEligibility

# Carry-forward is reported to the gram
CARRY_PRECISION = 6
# Absorbs float residue such as 0.9999999999 when summing carry-forward
CARRY_EPSILON = 1e-9


def grade_for_score(score: float) -> QualityGrade:
    """
    Map a verification score to a quality grade.

    Bands come from GRADE_THRESHOLDS (highest first, last bound 0), so every
    score in [0, 1] lands in exactly one grade. Out-of-range or NaN scores
    are clamped; NaN grades as D.
    """
    if score is None or math.isnan(score):
        return QualityGrade.D
    score = min(max(score, 0.0), 1.0)
    for grade, lower_bound in GRADE_THRESHOLDS:
        if score >= lower_bound:
            return QualityGrade(grade)
    return QualityGrade.D


def kg_to_tonnes(co2_kg: float) -> float:
    return max(co2_kg or 0.0, 0.0) / KG_PER_TONNE


def compute_credit_eligibility(
    total_co2_kg: float,
    score: float,
    status: VerificationStatus,
) -> CreditEligibility:
    """
    Convert a run's CO2e into issuable credits.

    Whole tonnes become credits only when the run is verified, and only a
    verified run carries its sub-tonne remainder forward. Unverified tonnage
    stays on its records, which remain unverified and are scored again by the
    next run.

    Args:
        total_co2_kg: Run total in kg CO2e
        score: Verification score in [0, 1]
        status: Verification status of the run

    Returns:
        CreditEligibility
    """
    tonnes = kg_to_tonnes(total_co2_kg)
    if status == VerificationStatus.VERIFIED:
        eligible = int(math.floor(tonnes / TONNES_PER_CREDIT))
        carry_forward = round(tonnes - eligible * TONNES_PER_CREDIT, CARRY_PRECISION)
    else:
        eligible = 0
        carry_forward = 0.0

    return CreditEligibility(
        eligible_credits=eligible,
        carry_forward=max(carry_forward, 0.0),
        quality_grade=grade_for_score(score),
    )


@dataclass(frozen=True)
class CreditLedger:
    """Credits accumulated across runs after converting whole tonnes of carry-forward."""
    total_credits: int
    carry_forward: float


def roll_forward(runs: Iterable) -> CreditLedger:
    """
    Accumulate credits across verification runs.

    Each run needs `status`, `eligible_credits` and `carry_forward`. Only
    verified runs count; accumulated carry-forward that crosses a whole tonne
    converts to credits and the fractional remainder stays on the ledger.
    """
    issued = 0
    carry = []
    for run in runs:
        if VerificationStatus(run.status) != VerificationStatus.VERIFIED:
            continue
        issued += int(run.eligible_credits or 0)
        carry.append(float(run.carry_forward or 0.0))

    accumulated = math.fsum(carry)
    converted = int(math.floor(accumulated + CARRY_EPSILON))
    remainder = round(max(accumulated - converted, 0.0), CARRY_PRECISION)
    return CreditLedger(total_credits=issued + converted, carry_forward=remainder)
