# SQLModel database models

from mrv.models.document import Document
from mrv.models.emission import EmissionRecord
from mrv.models.verification import VerificationRun
from mrv.models.organization import OrganizationProfile
from mrv.models.session import AnonymousSession
from mrv.models.audit import AuditLog

__all__ = [
    "Document",
    "EmissionRecord",
    "VerificationRun",
    "OrganizationProfile",
    "AnonymousSession",
    "AuditLog",
]
