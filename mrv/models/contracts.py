"""
Derived, never-persisted output contracts (camelCase on the wire).
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Dict, List, Optional

from mrv.models.enums import QualityGrade, Trend


class CamelModel(BaseModel):
    """Base for JSON contracts serialized with camelCase keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MonthlyTrendPoint(CamelModel):
    month: str
    scope1: float = 0.0
    scope2: float = 0.0
    scope3: float = 0.0


class AggregatedSummary(CamelModel):
    """Projection over a subject's emission records."""
    scope1: float = 0.0
    scope2: float = 0.0
    scope3: float = 0.0
    total: float = 0.0
    by_category: Dict[str, float] = Field(default_factory=dict)
    monthly_trend: List[MonthlyTrendPoint] = Field(default_factory=list)
    record_count: int = 0


class HistoricalSummary(CamelModel):
    """Rolling view over a subject's verification runs."""
    carbon_score: float = 0.0
    confidence_score: float = 0.0
    green_score: float = 0.0
    total_credits: int = 0
    carry_forward: float = 0.0
    quality_grade: QualityGrade = QualityGrade.D
    trend: Trend = Trend.STABLE
    improvement_rate: float = 0.0
    run_count: int = 0


class FrameworkCoverage(CamelModel):
    covered: List[str] = Field(default_factory=list)
    partial: List[str] = Field(default_factory=list)
    not_covered: List[str] = Field(default_factory=list)


class FrameworkReport(CamelModel):
    """Applicable frameworks for a profile with the verbatim disclaimer."""
    frameworks: List[str]
    framework_names: List[str]
    disclaimer: str
    override_applied: bool = False
    coverage: Optional[FrameworkCoverage] = None


class MonetizationPathway(CamelModel):
    type: str  # "carbon_credit", "green_loan", "govt_incentive"
    name: str
    partner: str
    estimated_value_inr: int
    description: str
    eligibility: str
    timeline: str
    requirements: List[str] = Field(default_factory=list)


class MonetizationReport(CamelModel):
    run_id: Optional[int] = None
    co2_tonnes: float
    verification_score: float
    total_potential_value_inr: int
    carbon_price_inr_per_tonne: int
    pathways: List[MonetizationPathway] = Field(default_factory=list)
