"""
Audit trail writer.
"""

import json
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Any, Dict, Optional

from mrv.models.audit import AuditLog
from mrv.utils.hashing import hash_payload


def record_audit(
    session: AsyncSession,
    action: str,
    entity_type: str,
    payload: Dict[str, Any],
    entity_id: Optional[Any] = None,
    subject_id: Optional[str] = None,
    extra_data: Optional[Dict[str, Any]] = None,
) -> AuditLog:
    """Add an audit entry to the session; the caller commits it with its own unit of work."""
    audit = AuditLog(
        payload_hash=hash_payload(payload),
        action=action,
        entity_type=entity_type,
        entity_id=str(entity_id) if entity_id is not None else None,
        subject_id=subject_id,
        extra_data=json.dumps(extra_data, sort_keys=True, default=str) if extra_data else None,
    )
    session.add(audit)
    return audit
