"""
ProcessSubmission Lambda

Processes "submission received" notifications delivered via SNS.
Fetches the submitted archive, stores it in S3, emails the submitter and
records the outcome in DynamoDB.

Flow:
    Submission service
    → SNS Topic
    → This Lambda
    → S3 object + SES email + DynamoDB outcome record
"""

from lambdas.process_submission.event_decoder import decode_submission_event
from lambdas.process_submission.handler import lambda_handler
from lambdas.process_submission.pipeline import PipelineResult, SubmissionPipeline

__all__ = [
    "PipelineResult",
    "SubmissionPipeline",
    "decode_submission_event",
    "lambda_handler",
]
