# Submission Tools
"""
Tool implementations for the submission pipeline.

Each tool wraps one external collaborator (remote HTTP source, S3, SES,
DynamoDB) and accepts an injected client for tests and local runs.
"""

from submissions.tools.dynamodb import (
    load_outcome,
    record_outcome,
)
from submissions.tools.email import (
    send_notification,
)
from submissions.tools.fetch import (
    FetchedSubmission,
    fetch_submission,
)
from submissions.tools.s3 import (
    build_object_key,
    get_submission_url,
    stream_submission,
)

__all__ = [
    # DynamoDB tools
    "record_outcome",
    "load_outcome",
    # Email tools
    "send_notification",
    # Fetch tools
    "FetchedSubmission",
    "fetch_submission",
    # S3 tools
    "build_object_key",
    "stream_submission",
    "get_submission_url",
]
