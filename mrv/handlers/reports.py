"""
Report handlers: verification history and compliance framework reports.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from typing import Iterable, Optional

from mrv.engine.frameworks import build_framework_report
from mrv.engine.history import summarize_history
from mrv.handlers.emissions import get_emission_summary
from mrv.handlers.organizations import get_profile
from mrv.handlers.verification import list_verifications
from mrv.models.contracts import FrameworkReport, HistoricalSummary
from mrv.models.subject import Subject


async def get_history_summary(session: AsyncSession, subject: Subject) -> HistoricalSummary:
    """Roll up every verification run the subject owns."""
    runs = await list_verifications(session, subject)
    return summarize_history(runs)


async def get_framework_report(
    session: AsyncSession,
    user_id: str,
    override: Optional[Iterable[str]] = None,
) -> FrameworkReport:
    """
    Frameworks for the user's stored profile, with coverage against their records.

    Raises:
        SubjectNotFoundError: if the user has no organization profile
        ValueError: if the override names an unknown framework
    """
    profile = await get_profile(session, user_id)
    summary = await get_emission_summary(session, Subject(user_id=user_id))
    return build_framework_report(profile, override=override, summary=summary)
