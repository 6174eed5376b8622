"""
Anonymous session endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from mrv.core.database import get_session
from mrv.core.errors import SessionMergeError, SessionOwnershipError, SubjectNotFoundError
from mrv.handlers.sessions import create_session, merge_session
from mrv.models.session import (
    AnonymousSessionCreate,
    AnonymousSessionRead,
    SessionMergeRequest,
    SessionMergeResult,
)

router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.post("/", response_model=AnonymousSessionRead, status_code=status.HTTP_201_CREATED)
async def create_session_endpoint(
    data: AnonymousSessionCreate,
    session: AsyncSession = Depends(get_session)
):
    """Start an anonymous session bound to a device fingerprint."""
    return await create_session(session, data)


@router.post("/{session_id}/merge", response_model=SessionMergeResult)
async def merge_session_endpoint(
    session_id: str,
    request: SessionMergeRequest,
    session: AsyncSession = Depends(get_session)
):
    """
    Re-own all of a session's documents, emissions and verification runs to a user.
    All rows move in one transaction or none do.
    """
    try:
        return await merge_session(session, session_id, request.user_id, request.device_fingerprint)
    except SubjectNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except SessionOwnershipError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except SessionMergeError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
