"""
Error kinds raised by the handlers.

Scoring degradation never raises; these cover failures a caller must see.
"""


class ExtractionError(Exception):
    """Upstream document extraction failed; the pipeline stops for this document."""


class SubjectNotFoundError(ValueError):
    """A referenced document, run, session or profile does not exist for the subject."""


class SessionOwnershipError(Exception):
    """Device fingerprint did not match the anonymous session being merged."""


class SessionMergeError(Exception):
    """The session merge transaction failed and was rolled back."""


class MonetizationError(ValueError):
    """The run cannot be monetized (not verified, or nothing to sell)."""


class AlreadyVerifiedError(ValueError):
    """Requested emission records were already credited by an earlier verified run."""
