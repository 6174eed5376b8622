"""
Verification run model - append-only result of scoring a batch of emission records.
"""

from sqlmodel import SQLModel, Field
from sqlalchemy import Column, JSON
from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime

from mrv.core.constants import (
    METHODOLOGY_ID,
    METHODOLOGY_VERSION,
    METHODOLOGY_COUNTRY,
    EMISSION_FACTOR_DATASET,
)
from mrv.models.contracts import CamelModel
from mrv.models.enums import (
    VerificationStatus,
    GreenwashingRisk,
    DataQuality,
    QualityGrade,
)
from mrv.utils.time import utc_now


class VerificationRunBase(SQLModel):
    """Base verification run schema."""
    total_co2_kg: float = Field(default=0.0, ge=0)
    net_emissions_kg: float = Field(default=0.0, ge=0)
    verified_reductions_kg: float = Field(default=0.0, ge=0)
    score: float = Field(default=0.0, ge=0, le=1)
    status: VerificationStatus = Field(default=VerificationStatus.NO_DATA)
    greenwashing_risk: GreenwashingRisk = Field(default=GreenwashingRisk.LOW)
    data_quality: DataQuality = Field(default=DataQuality.LOW)
    scope1_kg: float = Field(default=0.0, ge=0)
    scope2_kg: float = Field(default=0.0, ge=0)
    scope3_kg: float = Field(default=0.0, ge=0)
    green_score: int = Field(default=0, ge=0, le=100)
    eligible_credits: int = Field(default=0, ge=0)
    carry_forward: float = Field(default=0.0, ge=0)
    quality_grade: QualityGrade = Field(default=QualityGrade.D)
    ccts_eligible: bool = Field(default=False)
    cbam_compliant: bool = Field(default=False)
    include_iot: bool = Field(default=False)
    reduction_claimed: bool = Field(default=False)
    baseline_documented: bool = Field(default=False)
    methodology: str = Field(default=METHODOLOGY_ID)
    methodology_version: str = Field(default=METHODOLOGY_VERSION)
    methodology_country: str = Field(default=METHODOLOGY_COUNTRY)
    emission_factor_dataset: str = Field(default=EMISSION_FACTOR_DATASET)


class VerificationRun(VerificationRunBase, table=True):
    """Verification run database table - rows are inserted, never updated."""
    __tablename__ = "verification_runs"

    id: Optional[int] = Field(default=None, primary_key=True)
    flags: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    recommendations: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    emission_ids: List[int] = Field(default_factory=list, sa_column=Column(JSON))
    user_id: Optional[str] = Field(default=None, index=True)
    session_id: Optional[str] = Field(default=None, index=True)
    created_at: datetime = Field(default_factory=utc_now)


class VerificationRunCreate(VerificationRunBase):
    """Scorer output, ready to be persisted by the caller."""
    flags: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    emission_ids: List[int] = Field(default_factory=list)


class VerificationRequest(BaseModel):
    """Options for a verification call."""
    include_iot: bool = False
    reduction_claimed: bool = False
    baseline_documented: bool = False
    green_score: Optional[int] = None
    emission_ids: Optional[List[int]] = None


class ScopeBreakdown(CamelModel):
    scope1: float
    scope2: float
    scope3: float


class CreditEligibility(CamelModel):
    """Issuable credits for one run."""
    eligible_credits: int = 0
    carry_forward: float = 0.0
    quality_grade: QualityGrade = QualityGrade.D


class Methodology(CamelModel):
    id: str
    version: str
    country: str
    emission_factor_dataset: str


class VerificationReport(CamelModel):
    """JSON contract consumed by reporting and dashboards."""
    id: Optional[int] = None
    total_co2_kg: float
    net_emissions_kg: float
    verified_reductions_kg: float
    score: float
    status: VerificationStatus
    greenwashing_risk: GreenwashingRisk
    data_quality: DataQuality
    scope_breakdown: ScopeBreakdown
    green_score: int
    credit_eligibility: CreditEligibility
    ccts_eligible: bool
    cbam_compliant: bool
    recommendations: List[str]
    flags: List[str]
    emission_ids: List[int]
    methodology: Methodology
    created_at: Optional[datetime] = None

    @classmethod
    def from_run(cls, run: VerificationRunBase) -> "VerificationReport":
        """Build the report from a stored run or an unsaved scorer result."""
        return cls(
            id=getattr(run, "id", None),
            total_co2_kg=run.total_co2_kg,
            net_emissions_kg=run.net_emissions_kg,
            verified_reductions_kg=run.verified_reductions_kg,
            score=run.score,
            status=run.status,
            greenwashing_risk=run.greenwashing_risk,
            data_quality=run.data_quality,
            scope_breakdown=ScopeBreakdown(
                scope1=run.scope1_kg,
                scope2=run.scope2_kg,
                scope3=run.scope3_kg,
            ),
            green_score=run.green_score,
            credit_eligibility=CreditEligibility(
                eligible_credits=run.eligible_credits,
                carry_forward=run.carry_forward,
                quality_grade=run.quality_grade,
            ),
            ccts_eligible=run.ccts_eligible,
            cbam_compliant=run.cbam_compliant,
            recommendations=list(run.recommendations or []),
            flags=list(run.flags or []),
            emission_ids=list(run.emission_ids or []),
            methodology=Methodology(
                id=run.methodology,
                version=run.methodology_version,
                country=run.methodology_country,
                emission_factor_dataset=run.emission_factor_dataset,
            ),
            created_at=getattr(run, "created_at", None),
        )
