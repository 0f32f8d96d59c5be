"""
Event Models

Pydantic model for the "submission received" notification carried in the
SNS message body. Field aliases match the JSON keys published upstream.
"""

from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Characters that are invalid or ambiguous in the submission key namespace
_KEY_REPLACEMENTS = str.maketrans({":": "-", ".": "-"})


def derive_storage_key(
    first_name: str,
    last_name: str,
    assignment_name: str,
    submission_time: str,
) -> str:
    """
    Build the deterministic object key for a submission.

    Format: {first_name}_{last_name}_{assignment_name}_{submission_time}
    with every ':' and '.' replaced by '-'.

    Identical metadata always yields the identical key, so a re-delivered
    event overwrites the earlier object instead of duplicating it.
    """
    raw = "_".join((first_name, last_name, assignment_name, submission_time))
    return raw.translate(_KEY_REPLACEMENTS)


class SubmissionEvent(BaseModel):
    """Decoded submission notification."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )

    submitter_email: str = Field(
        ...,
        alias="userEmail",
        min_length=1,
        description="Address the outcome email is sent to",
    )
    submission_url: str = Field(
        ...,
        alias="submission_url",
        min_length=1,
        description="Absolute URL of the submitted archive",
    )
    first_name: str = Field(..., alias="firstName", min_length=1)
    last_name: str = Field(..., alias="lastName", min_length=1)
    assignment_name: str = Field(..., alias="assignmentName", min_length=1)
    submission_time: str = Field(
        ...,
        alias="submissionTime",
        min_length=1,
        description="Submission timestamp as published upstream (ISO-8601)",
    )

    @field_validator("submission_url")
    @classmethod
    def validate_absolute_url(cls, value: str) -> str:
        parsed = urlparse(value)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"submission_url must be an absolute http(s) URL: {value!r}")
        return value

    @property
    def storage_key(self) -> str:
        """Deterministic object key derived from the submission metadata."""
        return derive_storage_key(
            self.first_name,
            self.last_name,
            self.assignment_name,
            self.submission_time,
        )
