"""
ProcessSubmission Lambda Handler

Main entry point for "submission received" notifications.
Decodes the SNS envelope and runs the submission pipeline.

Trigger: SNS topic carrying submission notifications
Output: S3 object, SES email to the submitter, DynamoDB outcome record

Flow:
1. Decode the first SNS record into a SubmissionEvent
2. Fetch and validate the submitted archive
3. Stream it into S3 under the derived key
4. Email the submitter (success or failure)
5. Persist the outcome record
"""

import json
import logging
from typing import Any

import structlog

from lambdas.process_submission.event_decoder import decode_submission_event
from lambdas.process_submission.pipeline import SubmissionPipeline
from submissions.config import get_settings
from submissions.exceptions import MalformedEventError

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)
logging.getLogger().setLevel(get_settings().log_level)

log = structlog.get_logger()


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """
    AWS Lambda handler for submission notifications.

    A malformed event is logged and answered with 400 instead of raising,
    so the platform does not redeliver it. Every other outcome, including
    a failed outcome-record write, returns 200: redelivery would send the
    submitter a second email for a submission that was already handled.

    Args:
        event: SNS event containing the submission notification
        context: Lambda context

    Returns:
        Response dict with processing status
    """
    request_id = getattr(context, "aws_request_id", "local")
    records = event.get("Records") if isinstance(event, dict) else None

    log.info(
        "processing_submission_event",
        request_id=request_id,
        record_count=len(records) if isinstance(records, list) else 0,
    )

    try:
        submission = decode_submission_event(event)
    except MalformedEventError as e:
        log.error(
            "malformed_submission_event",
            request_id=request_id,
            error=str(e),
        )
        return {
            "statusCode": 400,
            "body": json.dumps({"error": e.message, "details": e.context}),
        }

    result = SubmissionPipeline().run(submission)

    log.info(
        "submission_event_processed",
        request_id=request_id,
        **result.to_dict(),
    )

    return {
        "statusCode": 200,
        "body": json.dumps(result.to_dict()),
    }
