"""
Anonymous session handlers.

A merge re-owns every document, emission record and verification run of a
session to a user in a single transaction: either all rows move or none do.
"""

import logging
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from mrv.core.errors import SessionMergeError, SessionOwnershipError, SubjectNotFoundError
from mrv.handlers.audit import record_audit
from mrv.models.document import Document
from mrv.models.emission import EmissionRecord
from mrv.models.session import AnonymousSession, AnonymousSessionCreate, SessionMergeResult
from mrv.models.verification import VerificationRun
from mrv.utils.time import utc_now

logger = logging.getLogger(__name__)

# Tables whose rows are re-owned on merge, keyed by the result field
MERGED_TABLES = (
    ("documents", Document),
    ("emission_records", EmissionRecord),
    ("verification_runs", VerificationRun),
)


async def create_session(session: AsyncSession, data: AnonymousSessionCreate) -> AnonymousSession:
    anonymous = AnonymousSession(device_fingerprint=data.device_fingerprint)
    session.add(anonymous)
    await session.commit()
    await session.refresh(anonymous)
    return anonymous


async def get_anonymous_session(session: AsyncSession, session_id: str) -> AnonymousSession:
    anonymous = await session.get(AnonymousSession, session_id)
    if not anonymous:
        raise SubjectNotFoundError(f"Session {session_id} not found")
    return anonymous


async def merge_session(
    session: AsyncSession,
    session_id: str,
    user_id: str,
    device_fingerprint: str,
) -> SessionMergeResult:
    """
    Move all rows owned by an anonymous session to a user.

    Args:
        session: Database session
        session_id: Anonymous session being merged
        user_id: Account taking ownership
        device_fingerprint: Must match the fingerprint the session was created with

    Returns:
        SessionMergeResult with per-table row counts

    Raises:
        SubjectNotFoundError: unknown session
        SessionOwnershipError: fingerprint mismatch (audited)
        SessionMergeError: session already merged into another user, or the
            transaction failed and was rolled back
    """
    anonymous = await get_anonymous_session(session, session_id)

    if anonymous.device_fingerprint != device_fingerprint:
        record_audit(
            session,
            action="session_merge_rejected",
            entity_type="anonymous_session",
            payload={"session_id": session_id, "user_id": user_id, "reason": "fingerprint_mismatch"},
            entity_id=session_id,
            subject_id=f"user:{user_id}",
        )
        await session.commit()
        logger.warning(f"Rejected merge of session {session_id} into {user_id}: fingerprint mismatch")
        raise SessionOwnershipError("Device fingerprint does not match session")

    if anonymous.merged_into_user_id:
        if anonymous.merged_into_user_id != user_id:
            raise SessionMergeError(f"Session {session_id} was already merged into another account")
        return SessionMergeResult(session_id=session_id, user_id=user_id)

    counts = {}
    try:
        for field, model in MERGED_TABLES:
            result = await session.execute(
                update(model)
                .where(model.session_id == session_id)
                .values(user_id=user_id, session_id=None)
            )
            counts[field] = result.rowcount or 0

        anonymous.merged_into_user_id = user_id
        anonymous.merged_at = utc_now()
        record_audit(
            session,
            action="session_merged",
            entity_type="anonymous_session",
            payload={"session_id": session_id, "user_id": user_id, **counts},
            entity_id=session_id,
            subject_id=f"user:{user_id}",
        )
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(f"Merge of session {session_id} into {user_id} rolled back: {e}")
        raise SessionMergeError(f"Merge failed and was rolled back: {e}") from e

    logger.info(f"Merged session {session_id} into {user_id}: {counts}")
    return SessionMergeResult(session_id=session_id, user_id=user_id, **counts)
