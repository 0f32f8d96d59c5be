# Submission Ingestion
"""
Shared components for the submission ingestion pipeline.

This package provides:
- Pipeline stage definitions (PipelineStage, valid transitions)
- Pydantic models for the inbound event and the outcome record
- Tool implementations for the remote fetch, S3, SES and DynamoDB
- Configuration management
- Custom exceptions
"""

from submissions.config import Settings, get_settings
from submissions.exceptions import (
    EmptyPayloadError,
    FetchFailedError,
    InvalidFormatError,
    MalformedEventError,
    NotificationError,
    PersistenceFailedError,
    SubmissionError,
    SubmissionRejectedError,
    UploadFailedError,
)
from submissions.state_machine import PipelineStage, VALID_TRANSITIONS, validate_transition

__all__ = [
    # State machine
    "PipelineStage",
    "VALID_TRANSITIONS",
    "validate_transition",
    # Exceptions
    "SubmissionError",
    "SubmissionRejectedError",
    "MalformedEventError",
    "InvalidFormatError",
    "EmptyPayloadError",
    "FetchFailedError",
    "UploadFailedError",
    "NotificationError",
    "PersistenceFailedError",
    # Config
    "Settings",
    "get_settings",
]
