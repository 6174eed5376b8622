"""
Organization profile model - drives compliance framework applicability.
"""

from sqlmodel import SQLModel, Field
from pydantic import field_validator
from typing import Optional
from datetime import datetime

from mrv.models.enums import OrganizationSize
from mrv.utils.time import utc_now


class OrganizationProfileBase(SQLModel):
    """Base organization profile schema."""
    country: str = Field(default="IN", max_length=2, description="ISO 3166-1 alpha-2")
    size: OrganizationSize = Field(default=OrganizationSize.SMALL)
    exports_to_eu: bool = Field(default=False)
    seeking_finance: bool = Field(default=False)
    has_net_zero_target: bool = Field(default=False)
    sector: Optional[str] = Field(default=None)

    @field_validator("country", mode="before")
    @classmethod
    def _upper_country(cls, value):
        return str(value).strip().upper() if value is not None else "IN"

    @field_validator("sector", mode="before")
    @classmethod
    def _lower_sector(cls, value):
        if value is None:
            return None
        text = str(value).strip().lower()
        return text or None


class OrganizationProfile(OrganizationProfileBase, table=True):
    """Organization profile database table (one per user)."""
    __tablename__ = "organization_profiles"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(..., index=True, unique=True)
    updated_at: datetime = Field(default_factory=utc_now)


class OrganizationProfileCreate(OrganizationProfileBase):
    """Schema for creating or replacing a profile."""
    pass


class OrganizationProfileRead(OrganizationProfileBase):
    """Schema for reading a profile."""
    id: int
    user_id: str
    updated_at: datetime
