"""
Document model and the ExtractedData contract produced by the OCR/extraction service.
"""

import re
from sqlmodel import SQLModel, Field
from pydantic import BaseModel, ConfigDict, field_validator
from pydantic import Field as PydanticField
from pydantic.alias_generators import to_camel
from typing import Optional, List
from datetime import datetime

from mrv.models.enums import ClassificationMethod
from mrv.utils.time import utc_now


def parse_scope(value) -> Optional[int]:
    """Accept 2, "2" or "Scope 2"; anything outside 1..3 is treated as absent."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        scope = int(value)
    else:
        match = re.search(r"[123]", str(value))
        if not match:
            return None
        scope = int(match.group(0))
    return scope if scope in (1, 2, 3) else None


class LineItem(BaseModel):
    """One extracted invoice line."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    description: Optional[str] = None
    hsn_code: Optional[str] = PydanticField(default=None, alias="hsn_code")
    quantity: Optional[float] = None
    unit: Optional[str] = None
    product_category: Optional[str] = None
    emission_category: Optional[str] = None
    scope: Optional[int] = None
    co2_kg: Optional[float] = None
    emission_factor: Optional[float] = None
    factor_source: Optional[str] = None
    classification_method: ClassificationMethod = ClassificationMethod.UNVERIFIABLE

    @field_validator("scope", mode="before")
    @classmethod
    def _parse_scope(cls, value):
        return parse_scope(value)

    @field_validator("classification_method", mode="before")
    @classmethod
    def _normalise_method(cls, value):
        if value is None:
            return ClassificationMethod.UNVERIFIABLE
        text = str(value).strip().upper()
        if text in ClassificationMethod.__members__:
            return text
        return ClassificationMethod.UNVERIFIABLE


class ExtractedData(BaseModel):
    """Structured result of document extraction (camelCase on the wire)."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    document_type: Optional[str] = None
    vendor: Optional[str] = None
    invoice_number: Optional[str] = None
    date: Optional[str] = None
    amount: Optional[float] = None
    currency: Optional[str] = None
    line_items: List[LineItem] = PydanticField(default_factory=list)
    primary_scope: Optional[int] = None
    primary_category: Optional[str] = None
    emission_category: Optional[str] = None
    total_co2_kg: Optional[float] = PydanticField(default=None, alias="totalCO2Kg")
    estimated_co2_kg: Optional[float] = PydanticField(default=None, alias="estimatedCO2Kg")
    emission_factor: Optional[float] = None
    activity_data: Optional[float] = None
    activity_unit: Optional[str] = None
    confidence: float = PydanticField(default=0.0, ge=0, le=1)
    validation_flags: List[str] = PydanticField(default_factory=list)
    classification_status: Optional[str] = None
    error: Optional[str] = None

    @field_validator("primary_scope", mode="before")
    @classmethod
    def _parse_primary_scope(cls, value):
        return parse_scope(value)

    def resolved_total_co2_kg(self) -> float:
        """Document-level CO2e using the legacy fallback order."""
        if self.total_co2_kg is not None:
            return max(self.total_co2_kg, 0.0)
        if self.estimated_co2_kg is not None:
            return max(self.estimated_co2_kg, 0.0)
        return 0.0


class DocumentBase(SQLModel):
    """Base document schema."""
    document_type: Optional[str] = Field(default=None)
    vendor: Optional[str] = Field(default=None)
    invoice_number: Optional[str] = Field(default=None)
    amount: Optional[float] = Field(default=None)
    currency: Optional[str] = Field(default=None)
    confidence: float = Field(default=0.0, ge=0, le=1)
    total_co2_kg: float = Field(default=0.0, ge=0)
    line_item_count: int = Field(default=0, ge=0)
    classification_status: Optional[str] = Field(default=None)


class Document(DocumentBase, table=True):
    """Document database table."""
    __tablename__ = "documents"

    id: Optional[int] = Field(default=None, primary_key=True)
    payload_hash: str = Field(..., description="SHA-256 of the extracted payload")
    user_id: Optional[str] = Field(default=None, index=True)
    session_id: Optional[str] = Field(default=None, index=True)
    created_at: datetime = Field(default_factory=utc_now)


class DocumentRead(DocumentBase):
    """Schema for reading a document."""
    id: int
    payload_hash: str
    user_id: Optional[str] = None
    session_id: Optional[str] = None
    created_at: datetime
