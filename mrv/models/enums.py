"""
Closed value sets shared by tables, contracts and the engine.
"""

from enum import Enum


class EmissionCategory(str, Enum):
    """Canonical emission category."""
    FUEL = "fuel"
    ELECTRICITY = "electricity"
    TRANSPORT = "transport"
    MATERIALS = "materials"
    WASTE = "waste"
    OTHER = "other"


class DataQuality(str, Enum):
    """Record data quality, ordered high to low."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ClassificationMethod(str, Enum):
    """How a line item was classified by the extractor."""
    HSN = "HSN"
    KEYWORD = "KEYWORD"
    UNVERIFIABLE = "UNVERIFIABLE"


class VerificationStatus(str, Enum):
    """Verification run outcome."""
    VERIFIED = "verified"
    NEEDS_REVIEW = "needs_review"
    REJECTED = "rejected"
    NO_DATA = "no_data"


class GreenwashingRisk(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class QualityGrade(str, Enum):
    A = "A"
    B = "B"
    C = "C"
    D = "D"


class Trend(str, Enum):
    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE = "stable"


class OrganizationSize(str, Enum):
    """Organization size band."""
    MICRO = "micro"
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    LARGE_LISTED = "large_listed"
