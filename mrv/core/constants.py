"""
Verification, grading and credit constants for the MRV engine.

Every threshold the engine compares against lives here so a change to a band
is a one-line, auditable diff.
"""

# Conversion: 1 Carbon Credit = 1 metric tonne CO2e
KG_PER_TONNE = 1000.0
TONNES_PER_CREDIT = 1.0

# Verification status bands (score in [0, 1])
VERIFIED_SCORE_THRESHOLD = 0.80
REVIEW_SCORE_THRESHOLD = 0.50

# Score component weights, must sum to 1
CONFIDENCE_WEIGHT = 0.40
METHODOLOGY_WEIGHT = 0.35
PROVENANCE_WEIGHT = 0.25

# Methodology credit per classification method
METHOD_WEIGHTS = {
    "HSN": 1.0,
    "KEYWORD": 0.6,
    "UNVERIFIABLE": 0.0,
}

# Confidence assumed when a record carries none of its own
QUALITY_CONFIDENCE = {
    "high": 0.9,
    "medium": 0.7,
    "low": 0.4,
}

# Per-record rule thresholds
LOW_CONFIDENCE_THRESHOLD = 0.5
ABNORMAL_ACTIVITY_THRESHOLD = 1_000_000
UNVERIFIABLE_SHARE_THRESHOLD = 0.20
DOMINANT_SCOPE_SHARE = 0.50

# Quality grade lower bounds, highest first
GRADE_THRESHOLDS = (
    ("A", 0.90),
    ("B", 0.75),
    ("C", 0.50),
    ("D", 0.0),
)

# IoT / efficiency metering adjustment
IOT_REDUCTION_RATE = 0.05

# Green score formula
GREEN_SCORE_SCOPE_PENALTY = {1: 50.0, 2: 30.0, 3: 20.0}
GREEN_SCORE_MAX_REDUCTION_BONUS = 0.30

# Historical trend
TREND_DELTA = 5.0
TREND_MONTHS = 6
# Green score assumed for a run that carries none (neutral midpoint)
DEFAULT_GREEN_SCORE = 50.0
STATUS_CONFIDENCE = {
    "verified": 100.0,
    "needs_review": 60.0,
    "rejected": 30.0,
    "no_data": 0.0,
}

# Methodology identifiers stamped on every verification run
METHODOLOGY_ID = "BIOCOG_MVR_INDIA"
METHODOLOGY_VERSION = "v1.0"
METHODOLOGY_COUNTRY = "IN"
EMISSION_FACTOR_DATASET = "IND_EF_2025"

# Monetization
CARBON_PRICE_INR_PER_TONNE = 750
MIN_CREDIT_SALE_VALUE_INR = 100
GREEN_LOAN_PRINCIPAL_INR = 500_000
GREEN_LOAN_RATE_REDUCTION_PCT = 0.5
MIN_SCHEME_BENEFIT_INR = 10_000
