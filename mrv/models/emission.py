"""
Emission record model - one classified CO2e fact per document line item.

Records are immutable after insert; only `verified` and the owner columns
(on anonymous session merge) are ever updated.
"""

from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime

from mrv.models.enums import EmissionCategory, DataQuality, ClassificationMethod
from mrv.utils.time import utc_now


class EmissionRecordBase(SQLModel):
    """Base emission record schema."""
    scope: int = Field(..., ge=1, le=3, description="GHG Protocol scope")
    category: EmissionCategory = Field(default=EmissionCategory.OTHER)
    co2_kg: float = Field(..., ge=0, description="CO2e in kilograms")
    activity_data: Optional[float] = Field(default=None, description="Activity quantity")
    activity_unit: Optional[str] = Field(default=None)
    emission_factor: Optional[float] = Field(default=None, description="kg CO2e per activity unit")
    factor_source: Optional[str] = Field(default=None)
    data_quality: DataQuality = Field(default=DataQuality.MEDIUM)
    classification_method: ClassificationMethod = Field(default=ClassificationMethod.KEYWORD)
    confidence: Optional[float] = Field(default=None, ge=0, le=1)
    scope_conflict: bool = Field(
        default=False,
        description="Line-item scope disagreed with the category default scope"
    )
    document_id: Optional[int] = Field(default=None, foreign_key="documents.id", index=True)


class EmissionRecord(EmissionRecordBase, table=True):
    """Emission record database table."""
    __tablename__ = "emission_records"

    id: Optional[int] = Field(default=None, primary_key=True)
    verified: bool = Field(default=False)
    user_id: Optional[str] = Field(default=None, index=True)
    session_id: Optional[str] = Field(default=None, index=True)
    created_at: datetime = Field(default_factory=utc_now)


class EmissionRecordCreate(EmissionRecordBase):
    """Schema for creating an emission record."""
    created_at: Optional[datetime] = None


class EmissionRecordRead(EmissionRecordBase):
    """Schema for reading an emission record."""
    id: int
    verified: bool
    user_id: Optional[str] = None
    session_id: Optional[str] = None
    created_at: datetime
