"""
Emission record queries and the aggregated summary projection.
"""

from datetime import datetime
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select
from typing import List, Optional, Sequence

from mrv.core.errors import SubjectNotFoundError
from mrv.engine.aggregator import aggregate
from mrv.models.contracts import AggregatedSummary
from mrv.models.emission import EmissionRecord
from mrv.models.subject import Subject


async def list_emissions(
    session: AsyncSession,
    subject: Subject,
    emission_ids: Optional[Sequence[int]] = None,
    unverified_only: bool = False,
) -> List[EmissionRecord]:
    """
    Emission records owned by the subject, oldest first.

    With `unverified_only`, records already credited by a verified run are skipped.

    Raises:
        SubjectNotFoundError: if any requested id is missing or owned by someone else
    """
    statement = select(EmissionRecord).where(subject.owns(EmissionRecord))
    if emission_ids is not None:
        statement = statement.where(EmissionRecord.id.in_(list(emission_ids)))
    if unverified_only:
        statement = statement.where(EmissionRecord.verified.is_(False))
    statement = statement.order_by(EmissionRecord.created_at, EmissionRecord.id)

    result = await session.execute(statement)
    records = list(result.scalars().all())

    if emission_ids is not None:
        missing = set(emission_ids) - {r.id for r in records}
        if missing:
            raise SubjectNotFoundError(f"Emission records not found: {sorted(missing)}")
    return records


async def get_emission_summary(
    session: AsyncSession,
    subject: Subject,
    now: Optional[datetime] = None,
) -> AggregatedSummary:
    """Recompute the AggregatedSummary from the subject's current records."""
    records = await list_emissions(session, subject)
    return aggregate(records, now=now)
