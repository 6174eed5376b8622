"""
test_history.py: weighted roll-up of verification runs
"""

import pytest

from mrv.engine.history import classify_trend, summarize_history
from mrv.models.enums import QualityGrade, Trend, VerificationStatus


def _newest_first(make_run, green_scores_oldest_first):
    return [make_run(green_score=g) for g in reversed(green_scores_oldest_first)]


class TestSummarizeHistory:

    def test_volume_weighted_carbon_score(self, make_run):
        runs = [
            make_run(total_co2_kg=10_000, score=1.0, status=VerificationStatus.VERIFIED),
            make_run(total_co2_kg=1_000, score=0.0, status=VerificationStatus.REJECTED),
        ]
        summary = summarize_history(runs)
        assert summary.carbon_score == pytest.approx(90.9, abs=0.05)
        assert summary.confidence_score == pytest.approx(93.64)

    def test_improving_trend(self, make_run):
        summary = summarize_history(_newest_first(make_run, [40, 45, 70, 75]))
        assert summary.trend == Trend.IMPROVING
        assert summary.improvement_rate == pytest.approx(8.75)

    def test_declining_trend(self, make_run):
        summary = summarize_history(_newest_first(make_run, [80, 78, 60, 50]))
        assert summary.trend == Trend.DECLINING
        assert summary.improvement_rate < 0

    def test_small_changes_are_stable(self, make_run):
        assert summarize_history(_newest_first(make_run, [50, 52, 53, 51])).trend == Trend.STABLE

    def test_grade_comes_from_newest_run(self, make_run):
        runs = [make_run(quality_grade=QualityGrade.C), make_run(quality_grade=QualityGrade.A)]
        assert summarize_history(runs).quality_grade == QualityGrade.C

    def test_empty_runs_count_once(self, make_run):
        runs = [make_run(total_co2_kg=0, score=0.8), make_run(total_co2_kg=0, score=0.4)]
        assert summarize_history(runs).carbon_score == pytest.approx(60.0)

    def test_carry_forward_converts_to_credits(self, make_run):
        runs = [
            make_run(eligible_credits=2, carry_forward=0.65),
            make_run(eligible_credits=1, carry_forward=0.4),
        ]
        summary = summarize_history(runs)
        assert summary.total_credits == 4
        assert summary.carry_forward == pytest.approx(0.05)

    def test_rejected_run_adds_no_credits(self, make_run):
        runs = [
            make_run(
                total_co2_kg=1500, score=0.1, status=VerificationStatus.REJECTED,
                eligible_credits=0, carry_forward=0.0,
            ),
        ]
        summary = summarize_history(runs)
        assert summary.total_credits == 0
        assert summary.carry_forward == 0

    def test_missing_green_score_counts_as_midpoint(self, make_run):
        runs = [make_run(green_score=None), make_run(green_score=70)]
        summary = summarize_history(runs)
        assert summary.green_score == pytest.approx(60.0)
        assert summary.improvement_rate == pytest.approx(-10.0)

    def test_no_runs_zero_state(self):
        summary = summarize_history([])
        assert summary.run_count == 0
        assert summary.total_credits == 0
        assert summary.quality_grade == QualityGrade.D
        assert summary.trend == Trend.STABLE


class TestClassifyTrend:

    def test_single_run_is_stable(self):
        assert classify_trend([90]) == Trend.STABLE

    def test_odd_count_middle_run_is_newer_half(self):
        # newer [70, 60] vs older [60]: delta exactly 5 is not improving
        assert classify_trend([70, 60, 60]) == Trend.STABLE
