"""
Payload hashing for the audit trail and document de-duplication.
"""

import hashlib
import json
from typing import Any, Dict


def canonical_json(payload: Any) -> str:
    """Serialize with sorted keys and no whitespace so equal payloads give equal bytes."""
    return json.dumps(payload, sort_keys=True, separators=(",", ":"), default=str)


def hash_payload(payload: Dict[str, Any]) -> str:
    """
    SHA-256 of the canonical JSON form of a payload.

    Used for extracted documents and for every audit entry, so the same
    extraction uploaded twice hashes identically.
    """
    return hashlib.sha256(canonical_json(payload).encode("utf-8")).hexdigest()
