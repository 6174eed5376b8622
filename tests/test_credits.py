"""
test_credits.py: credit eligibility, carry-forward and grade bands
"""

import math

import pytest

from mrv.core.constants import GRADE_THRESHOLDS
from mrv.engine.credits import compute_credit_eligibility, grade_for_score, roll_forward
from mrv.models.enums import QualityGrade, VerificationStatus

GRADE_ORDER = [QualityGrade.A, QualityGrade.B, QualityGrade.C, QualityGrade.D]


class TestCreditEligibility:

    def test_verified_run_issues_whole_tonnes(self):
        result = compute_credit_eligibility(2650, 0.85, VerificationStatus.VERIFIED)
        assert result.eligible_credits == 2
        assert result.carry_forward == pytest.approx(0.65)
        assert result.quality_grade == QualityGrade.B

    @pytest.mark.parametrize("status", [
        VerificationStatus.NEEDS_REVIEW,
        VerificationStatus.REJECTED,
        VerificationStatus.NO_DATA,
    ])
    def test_unverified_run_issues_and_carries_nothing(self, status):
        result = compute_credit_eligibility(2650, 0.6, status)
        assert result.eligible_credits == 0
        assert result.carry_forward == 0

    def test_negative_total_is_zero(self):
        result = compute_credit_eligibility(-500, 0.95, VerificationStatus.VERIFIED)
        assert result.eligible_credits == 0
        assert result.carry_forward == 0

    def test_credits_never_exceed_floor_of_tonnes(self):
        for kg in (0, 999.999, 1000, 1000.001, 12345.6):
            result = compute_credit_eligibility(kg, 1.0, VerificationStatus.VERIFIED)
            assert result.eligible_credits <= math.floor(kg / 1000)


class TestGrades:

    @pytest.mark.parametrize("score,grade", [
        (1.0, QualityGrade.A),
        (0.9, QualityGrade.A),
        (0.8999, QualityGrade.B),
        (0.75, QualityGrade.B),
        (0.7499, QualityGrade.C),
        (0.5, QualityGrade.C),
        (0.4999, QualityGrade.D),
        (0.0, QualityGrade.D),
    ])
    def test_band_boundaries(self, score, grade):
        assert grade_for_score(score) == grade

    def test_out_of_range_scores_are_clamped(self):
        assert grade_for_score(1.5) == QualityGrade.A
        assert grade_for_score(-0.2) == QualityGrade.D
        assert grade_for_score(float("nan")) == QualityGrade.D

    def test_bands_are_exhaustive_and_monotonic(self):
        previous = 0
        for step in range(1001):
            grade = grade_for_score(step / 1000)
            rank = len(GRADE_ORDER) - 1 - GRADE_ORDER.index(grade)
            assert rank >= previous
            previous = rank

    def test_threshold_table_is_gap_free(self):
        bounds = [bound for _, bound in GRADE_THRESHOLDS]
        assert bounds == sorted(bounds, reverse=True)
        assert len(set(bounds)) == len(bounds)
        assert bounds[-1] == 0.0


class TestRollForward:

    @staticmethod
    def _runs(make_run, runs):
        stored = []
        for kg, status in runs:
            credit = compute_credit_eligibility(kg, 0.9, status)
            stored.append(make_run(
                total_co2_kg=kg,
                status=status,
                eligible_credits=credit.eligible_credits,
                carry_forward=credit.carry_forward,
            ))
        return stored

    def test_verified_tonnage_is_conserved(self, make_run):
        runs = self._runs(make_run, [
            (2650, VerificationStatus.VERIFIED),
            (1250.5, VerificationStatus.VERIFIED),
            (720, VerificationStatus.VERIFIED),
        ])
        ledger = roll_forward(runs)

        assert sum(r.eligible_credits for r in runs) == 3
        assert ledger.total_credits == 4
        assert ledger.carry_forward == pytest.approx(0.6205)
        assert ledger.total_credits + ledger.carry_forward == pytest.approx(4.6205)

    @pytest.mark.parametrize("status", [
        VerificationStatus.NEEDS_REVIEW,
        VerificationStatus.REJECTED,
        VerificationStatus.NO_DATA,
    ])
    def test_unverified_run_adds_no_credits(self, make_run, status):
        verified = self._runs(make_run, [(2650, VerificationStatus.VERIFIED)])
        unverified = self._runs(make_run, [(1500, status)])
        assert roll_forward(verified + unverified) == roll_forward(verified)
        assert roll_forward(unverified).total_credits == 0

    def test_stored_unverified_carry_is_ignored(self, make_run):
        stale = make_run(status=VerificationStatus.REJECTED, eligible_credits=0, carry_forward=1.5)
        assert roll_forward([stale]).total_credits == 0

    def test_fractions_convert_once_they_cross_a_tonne(self, make_run):
        halves = self._runs(make_run, [
            (500, VerificationStatus.VERIFIED),
            (500, VerificationStatus.VERIFIED),
        ])
        ledger = roll_forward(halves)
        assert ledger.total_credits == 1
        assert ledger.carry_forward == 0

    def test_empty_ledger(self):
        ledger = roll_forward([])
        assert ledger.total_credits == 0
        assert ledger.carry_forward == 0
