# Submission Models
"""
Pydantic models for the inbound submission event and the outcome record.
"""

from submissions.models.events import SubmissionEvent, derive_storage_key
from submissions.models.outcome import OutcomeRecord, OutcomeStatus

__all__ = [
    "SubmissionEvent",
    "derive_storage_key",
    "OutcomeRecord",
    "OutcomeStatus",
]
