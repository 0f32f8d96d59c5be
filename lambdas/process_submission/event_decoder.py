"""
Event Decoder Module

Turns the SNS Lambda envelope into a typed SubmissionEvent.

Only the first record of the envelope is read. The upstream topic publishes
one submission per notification; additional records are logged and ignored.
"""

import json
from typing import Any

import structlog
from pydantic import ValidationError

from submissions.exceptions import MalformedEventError
from submissions.models.events import SubmissionEvent

log = structlog.get_logger()


def _first_sns_message(envelope: dict[str, Any]) -> str:
    """Extract the raw Message string of the first SNS record."""
    records = envelope.get("Records") if isinstance(envelope, dict) else None
    if not isinstance(records, list) or not records:
        raise MalformedEventError("envelope contains no records")

    if len(records) > 1:
        log.debug("extra_records_ignored", ignored_count=len(records) - 1)

    record = records[0]
    sns = record.get("Sns") if isinstance(record, dict) else None
    message = sns.get("Message") if isinstance(sns, dict) else None
    if not isinstance(message, str) or not message:
        raise MalformedEventError("first record carries no SNS message")

    return message


def _format_validation_errors(error: ValidationError) -> list[str]:
    return [
        f"{'.'.join(str(part) for part in err['loc']) or 'message'}: {err['msg']}"
        for err in error.errors()
    ]


def decode_submission_event(envelope: dict[str, Any]) -> SubmissionEvent:
    """
    Decode the first SNS record into a SubmissionEvent.

    Args:
        envelope: Lambda event as delivered by the SNS trigger

    Returns:
        Validated SubmissionEvent

    Raises:
        MalformedEventError: If there is no message, the message is not a
            JSON object, or a required field is missing or empty
    """
    message = _first_sns_message(envelope)

    try:
        payload = json.loads(message)
    except json.JSONDecodeError as e:
        raise MalformedEventError("message body is not valid JSON", error=str(e)) from e

    if not isinstance(payload, dict):
        raise MalformedEventError(
            "message body is not a JSON object",
            body_type=type(payload).__name__,
        )

    try:
        event = SubmissionEvent.model_validate(payload)
    except ValidationError as e:
        raise MalformedEventError(
            "missing or invalid submission fields",
            errors=_format_validation_errors(e),
        ) from e

    log.debug(
        "submission_event_decoded",
        submitter_email=event.submitter_email,
        assignment_name=event.assignment_name,
        storage_key=event.storage_key,
    )

    return event
