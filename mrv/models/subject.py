"""
Subject - the owner of records: a signed-in user or an anonymous session.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Subject:
    user_id: Optional[str] = None
    session_id: Optional[str] = None

    def __post_init__(self):
        if not self.user_id and not self.session_id:
            raise ValueError("A user_id or session_id is required")

    @property
    def key(self) -> str:
        return f"user:{self.user_id}" if self.user_id else f"session:{self.session_id}"

    def owns(self, model) -> Any:
        """SQL filter selecting rows of `model` owned by this subject."""
        if self.user_id:
            return model.user_id == self.user_id
        return model.session_id == self.session_id

    def owner_fields(self) -> Dict[str, Optional[str]]:
        if self.user_id:
            return {"user_id": self.user_id, "session_id": None}
        return {"user_id": None, "session_id": self.session_id}

    def matches(self, row) -> bool:
        if self.user_id:
            return row.user_id == self.user_id
        return row.session_id == self.session_id
