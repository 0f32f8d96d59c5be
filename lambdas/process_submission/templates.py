"""
Notification Templates

Subject and body templates for the outcome email. Success emails are built
only from the decoded event and the storage reference; failure emails carry
the user-facing message of the error that ended the pipeline.
"""

from submissions.models.events import SubmissionEvent

SUCCESS_SUBJECT_TEMPLATE = "Submission received: {assignment_name}"

SUCCESS_BODY_TEMPLATE = """\
Hello {first_name},

Your submission for {assignment_name} (submitted at {submission_time}) was
received and stored successfully.

Stored as: {storage_key}
Location: {storage_reference}

No further action is needed.
"""

FAILURE_SUBJECT_TEMPLATE = "Submission failed: {assignment_name}"

FAILURE_BODY_TEMPLATE = """\
Hello {first_name},

We could not accept your submission for {assignment_name} (submitted at
{submission_time}).

Reason: {error_message}

Please fix the problem and submit again.
"""


def render_success(
    event: SubmissionEvent,
    storage_reference: str,
) -> tuple[str, str]:
    """Render (subject, body) for a stored submission."""
    subject = SUCCESS_SUBJECT_TEMPLATE.format(assignment_name=event.assignment_name)
    body = SUCCESS_BODY_TEMPLATE.format(
        first_name=event.first_name,
        assignment_name=event.assignment_name,
        submission_time=event.submission_time,
        storage_key=event.storage_key,
        storage_reference=storage_reference,
    )
    return subject, body


def render_failure(
    event: SubmissionEvent,
    error_message: str,
) -> tuple[str, str]:
    """Render (subject, body) for a rejected submission."""
    subject = FAILURE_SUBJECT_TEMPLATE.format(assignment_name=event.assignment_name)
    body = FAILURE_BODY_TEMPLATE.format(
        first_name=event.first_name,
        assignment_name=event.assignment_name,
        submission_time=event.submission_time,
        error_message=error_message,
    )
    return subject, body
