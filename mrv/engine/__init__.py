# Pure verification engine: no I/O, no database access

from mrv.engine.classifier import classify, Classification
from mrv.engine.aggregator import aggregate
from mrv.engine.scorer import score_records, ScoringThresholds, FLAG_CATALOGUE
from mrv.engine.credits import compute_credit_eligibility, grade_for_score, roll_forward
from mrv.engine.frameworks import determine_frameworks, framework_disclaimer, build_framework_report
from mrv.engine.history import summarize_history
from mrv.engine.monetization import calculate_monetization

__all__ = [
    "classify",
    "Classification",
    "aggregate",
    "score_records",
    "ScoringThresholds",
    "FLAG_CATALOGUE",
    "compute_credit_eligibility",
    "grade_for_score",
    "roll_forward",
    "determine_frameworks",
    "framework_disclaimer",
    "build_framework_report",
    "summarize_history",
    "calculate_monetization",
]
