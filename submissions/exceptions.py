"""
Custom Exceptions for the Submission Ingestion Pipeline

All exceptions carry a developer-facing message plus structured context for
logging. Errors that end up in the submitter's failure email also carry a
``user_message`` which is the only text that may be shown to the submitter.
"""

from dataclasses import dataclass
from typing import Any


class SubmissionError(Exception):
    """Base exception for the submission ingestion pipeline."""

    user_message: str = "Your submission could not be processed."

    def __init__(self, message: str, **context: Any) -> None:
        self.message = message
        self.context = context
        super().__init__(message)

    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


@dataclass
class MalformedEventError(SubmissionError):
    """Inbound notification could not be decoded into a SubmissionEvent."""

    reason: str

    def __init__(self, reason: str, **context: Any) -> None:
        self.reason = reason
        super().__init__(f"Malformed submission event: {reason}", **context)


class SubmissionRejectedError(SubmissionError):
    """Base for errors that route the pipeline into the failure branch."""


@dataclass
class InvalidFormatError(SubmissionRejectedError):
    """Remote file does not declare the expected archive media type."""

    url: str
    content_type: str | None
    expected_content_type: str

    def __init__(
        self,
        url: str,
        content_type: str | None,
        expected_content_type: str = "application/zip",
    ) -> None:
        self.url = url
        self.content_type = content_type
        self.expected_content_type = expected_content_type
        self.user_message = (
            "The submission must be a ZIP archive. The file at the submitted URL "
            f"was served as '{content_type or 'unknown'}'."
        )
        super().__init__(
            f"Unexpected content type {content_type!r}, expected {expected_content_type!r}",
            url=url,
            content_type=content_type,
        )


@dataclass
class EmptyPayloadError(SubmissionRejectedError):
    """Remote file declares a content length of zero."""

    url: str

    user_message = "The submission file is empty. Please submit a non-empty ZIP archive."

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__("Remote file declares zero length", url=url)


@dataclass
class FetchFailedError(SubmissionRejectedError):
    """Transport-level failure while retrieving the remote file."""

    url: str
    status_code: int | None = None
    error_message: str | None = None

    # Upstream details stay in the logs, never in the email.
    user_message = (
        "Invalid URL: the submission could not be downloaded. "
        "Please check that the link is correct and publicly reachable."
    )

    def __init__(
        self,
        url: str,
        status_code: int | None = None,
        error_message: str | None = None,
    ) -> None:
        self.url = url
        self.status_code = status_code
        self.error_message = error_message
        super().__init__(
            f"Fetch failed for '{url}': {error_message or 'Unknown error'}",
            url=url,
            status_code=status_code,
        )


@dataclass
class UploadFailedError(SubmissionRejectedError):
    """Streaming the submission into S3 failed."""

    bucket: str
    key: str
    error_message: str | None = None

    user_message = (
        "The submission could not be stored. Please try submitting again."
    )

    def __init__(
        self,
        bucket: str,
        key: str,
        error_message: str | None = None,
    ) -> None:
        self.bucket = bucket
        self.key = key
        self.error_message = error_message
        super().__init__(
            f"S3 upload failed for s3://{bucket}/{key}: "
            f"{error_message or 'Unknown error'}",
            bucket=bucket,
            key=key,
        )


@dataclass
class NotificationError(SubmissionError):
    """SES email send failed."""

    recipient: str | None = None
    error_message: str | None = None

    def __init__(
        self,
        recipient: str | None = None,
        error_message: str | None = None,
    ) -> None:
        self.recipient = recipient
        self.error_message = error_message
        super().__init__(
            f"SES send failed{f' for {recipient}' if recipient else ''}: "
            f"{error_message or 'Unknown error'}",
            recipient=recipient,
        )


@dataclass
class PersistenceFailedError(SubmissionError):
    """Outcome record could not be written to DynamoDB."""

    table_name: str
    record_id: str
    error_message: str | None = None

    def __init__(
        self,
        table_name: str,
        record_id: str,
        error_message: str | None = None,
    ) -> None:
        self.table_name = table_name
        self.record_id = record_id
        self.error_message = error_message
        super().__init__(
            f"DynamoDB put failed on table '{table_name}': {error_message or 'Unknown error'}",
            table_name=table_name,
            record_id=record_id,
        )


@dataclass
class InvalidStageTransitionError(SubmissionError):
    """Attempted invalid pipeline stage transition."""

    current_stage: str
    new_stage: str
    allowed_transitions: list[str]

    def __init__(
        self,
        current_stage: str,
        new_stage: str,
        allowed_transitions: list[str],
    ) -> None:
        self.current_stage = current_stage
        self.new_stage = new_stage
        self.allowed_transitions = allowed_transitions
        super().__init__(
            f"Cannot transition from '{current_stage}' to '{new_stage}'. "
            f"Allowed transitions: {allowed_transitions}",
            current_stage=current_stage,
            new_stage=new_stage,
            allowed_transitions=allowed_transitions,
        )


@dataclass
class OutcomeAlreadyResolvedError(SubmissionError):
    """Outcome record was resolved a second time."""

    record_id: str
    status: str

    def __init__(self, record_id: str, status: str) -> None:
        self.record_id = record_id
        self.status = status
        super().__init__(
            f"Outcome record '{record_id}' is already resolved as '{status}'",
            record_id=record_id,
            status=status,
        )
