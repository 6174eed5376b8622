"""
Historical roll-up of verification runs: weighted scores, credits and trend.
"""

import math
from typing import Sequence

from mrv.core.constants import DEFAULT_GREEN_SCORE, STATUS_CONFIDENCE, TREND_DELTA
from mrv.engine.credits import roll_forward
from mrv.models.contracts import HistoricalSummary
from mrv.models.enums import QualityGrade, Trend, VerificationStatus


def _weight(run) -> float:
    """CO2e volume of the run; empty runs still count once."""
    total = run.total_co2_kg or 0.0
    return total if total > 0 else 1.0


def _weighted_mean(runs: Sequence, values: Sequence[float]) -> float:
    weights = [_weight(r) for r in runs]
    return math.fsum(w * v for w, v in zip(weights, values)) / math.fsum(weights)


def _green_score(run) -> float:
    value = getattr(run, "green_score", None)
    return DEFAULT_GREEN_SCORE if value is None else float(value)


def _status_confidence(run) -> float:
    status = run.status.value if isinstance(run.status, VerificationStatus) else str(run.status)
    return STATUS_CONFIDENCE.get(status, 0.0)


def classify_trend(green_scores_newest_first: Sequence[float]) -> Trend:
    """
    Compare the mean green score of the newer half against the older half.

    With an odd count the middle run belongs to the newer half.
    """
    n = len(green_scores_newest_first)
    if n < 2:
        return Trend.STABLE
    split = math.ceil(n / 2)
    newer = green_scores_newest_first[:split]
    older = green_scores_newest_first[split:]
    delta = sum(newer) / len(newer) - sum(older) / len(older)
    if delta > TREND_DELTA:
        return Trend.IMPROVING
    if delta < -TREND_DELTA:
        return Trend.DECLINING
    return Trend.STABLE


def summarize_history(runs: Sequence) -> HistoricalSummary:
    """
    Roll up verification runs for one subject.

    Args:
        runs: Verification runs ordered newest first

    Returns:
        HistoricalSummary with CO2e-weighted scores, the newest run's grade,
        credits including converted carry-forward, and the trend
    """
    runs = list(runs)
    if not runs:
        return HistoricalSummary()

    green_scores = [_green_score(r) for r in runs]
    ledger = roll_forward(runs)

    return HistoricalSummary(
        carbon_score=round(_weighted_mean(runs, [(r.score or 0.0) * 100.0 for r in runs]), 2),
        confidence_score=round(_weighted_mean(runs, [_status_confidence(r) for r in runs]), 2),
        green_score=round(_weighted_mean(runs, green_scores), 2),
        total_credits=ledger.total_credits,
        carry_forward=ledger.carry_forward,
        quality_grade=QualityGrade(runs[0].quality_grade),
        trend=classify_trend(green_scores),
        improvement_rate=round((green_scores[0] - green_scores[-1]) / len(runs), 2),
        run_count=len(runs),
    )
