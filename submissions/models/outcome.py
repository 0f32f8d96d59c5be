"""
Outcome Models

Pydantic model for the audit record written to the SubmissionOutcomes table.
One record is created per invocation and keyed by a fresh UUID.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from submissions.exceptions import OutcomeAlreadyResolvedError


class OutcomeStatus(str, Enum):
    """Final outcome of one invocation."""

    SUCCESS = "success"
    FAILURE = "failure"


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class OutcomeRecord(BaseModel):
    """
    Outcome record stored in DynamoDB.

    Hash key: id

    Created pending (empty subject/body, no status) when orchestration starts,
    resolved once by whichever branch runs, then persisted.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid4()), description="Unique record id")
    sender_email: str = Field(..., description="From address of the notification")
    receiver_email: str = Field(..., description="Submitter address")
    subject: str = Field(default="", description="Notification subject")
    body: str = Field(default="", description="Notification body text")
    status: OutcomeStatus | None = Field(default=None, description="None while pending")
    storage_key: str | None = Field(default=None, description="Derived object key")
    created_at: str = Field(default_factory=_utc_now_iso, description="ISO timestamp")

    @classmethod
    def pending(
        cls,
        sender_email: str,
        receiver_email: str,
        *,
        storage_key: str | None = None,
    ) -> "OutcomeRecord":
        """Create a pending record with a newly generated id."""
        return cls(
            sender_email=sender_email,
            receiver_email=receiver_email,
            storage_key=storage_key,
        )

    @property
    def is_resolved(self) -> bool:
        return self.status is not None

    def resolve(
        self,
        status: OutcomeStatus,
        subject: str,
        body: str,
    ) -> "OutcomeRecord":
        """
        Return the resolved copy of this record.

        Raises:
            OutcomeAlreadyResolvedError: If the record already has a status
        """
        if self.status is not None:
            raise OutcomeAlreadyResolvedError(self.id, self.status.value)
        return self.model_copy(
            update={"status": OutcomeStatus(status), "subject": subject, "body": body}
        )

    def to_dynamodb(self) -> dict[str, Any]:
        """Convert to DynamoDB item."""
        item: dict[str, Any] = {
            "id": self.id,
            "sender_email": self.sender_email,
            "receiver_email": self.receiver_email,
            "subject": self.subject,
            "body": self.body,
            "status": self.status.value if self.status else "",
            "created_at": self.created_at,
        }
        if self.storage_key:
            item["storage_key"] = self.storage_key
        return item

    @classmethod
    def from_dynamodb(cls, item: dict[str, Any]) -> "OutcomeRecord":
        """Parse from DynamoDB item."""
        status = item.get("status")
        return cls(
            id=item["id"],
            sender_email=item.get("sender_email", ""),
            receiver_email=item.get("receiver_email", ""),
            subject=item.get("subject", ""),
            body=item.get("body", ""),
            status=OutcomeStatus(status) if status else None,
            storage_key=item.get("storage_key"),
            created_at=item.get("created_at", ""),
        )
