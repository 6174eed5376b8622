"""
Anonymous session model - a subject that owns records before sign-up.
"""

import uuid
from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime

from mrv.utils.time import utc_now


def _new_session_id() -> str:
    return uuid.uuid4().hex


class AnonymousSessionBase(SQLModel):
    device_fingerprint: str = Field(..., min_length=1)


class AnonymousSession(AnonymousSessionBase, table=True):
    """Anonymous session database table."""
    __tablename__ = "anonymous_sessions"

    id: str = Field(default_factory=_new_session_id, primary_key=True)
    merged_into_user_id: Optional[str] = Field(default=None, index=True)
    merged_at: Optional[datetime] = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)


class AnonymousSessionCreate(AnonymousSessionBase):
    pass


class AnonymousSessionRead(AnonymousSessionBase):
    id: str
    merged_into_user_id: Optional[str] = None
    merged_at: Optional[datetime] = None
    created_at: datetime


class SessionMergeRequest(SQLModel):
    """Body for merging an anonymous session into an account."""
    user_id: str = Field(..., min_length=1)
    device_fingerprint: str = Field(..., min_length=1)


class SessionMergeResult(SQLModel):
    """Counts of rows re-owned by a merge."""
    session_id: str
    user_id: str
    documents: int = 0
    emission_records: int = 0
    verification_runs: int = 0
