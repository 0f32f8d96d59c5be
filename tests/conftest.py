"""
Pytest Configuration and Shared Fixtures

Provides moto AWS mocking, sample SNS envelopes, and fake HTTP sessions.
"""

import os
from typing import Any, Callable
from unittest.mock import MagicMock

import boto3
import pytest
import requests
from moto import mock_aws

# Set test environment before importing application modules
os.environ["SUBMISSIONS_S3_BUCKET_NAME"] = "test-submissions"
os.environ["SUBMISSIONS_DYNAMODB_TABLE_NAME"] = "TestSubmissionOutcomes"
os.environ["SUBMISSIONS_SES_FROM_ADDRESS"] = "test@example.com"
os.environ["SUBMISSIONS_AWS_REGION"] = "us-east-1"
os.environ["AWS_DEFAULT_REGION"] = "us-east-1"
os.environ["AWS_ACCESS_KEY_ID"] = "testing"
os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"

from submissions.config import Settings, get_settings  # noqa: E402
from tests.utils.event_generator import build_sns_envelope  # noqa: E402
from tests.utils.fakes import (  # noqa: E402
    BUCKET_NAME,
    SENDER,
    SUBMISSION_URL,
    TABLE_NAME,
    build_response,
)


# --- Settings Fixtures ---


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Ensure each test sees settings built from the test environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    """Settings built from the test environment."""
    return get_settings()


# --- AWS Mocking Fixtures ---


@pytest.fixture
def aws_credentials():
    """Mock AWS credentials for moto."""
    return {
        "aws_access_key_id": "testing",
        "aws_secret_access_key": "testing",
        "region_name": "us-east-1",
    }


def _create_outcomes_table(dynamodb):
    table = dynamodb.create_table(
        TableName=TABLE_NAME,
        KeySchema=[{"AttributeName": "id", "KeyType": "HASH"}],
        AttributeDefinitions=[{"AttributeName": "id", "AttributeType": "S"}],
        BillingMode="PAY_PER_REQUEST",
    )
    table.meta.client.get_waiter("table_exists").wait(TableName=TABLE_NAME)
    return table


@pytest.fixture
def mock_s3(aws_credentials):
    """Create a mocked S3 bucket."""
    with mock_aws():
        s3 = boto3.client("s3", **aws_credentials)
        s3.create_bucket(Bucket=BUCKET_NAME)
        yield s3


@pytest.fixture
def mock_ses(aws_credentials):
    """Create a mocked SES client with verified sender identity."""
    with mock_aws():
        ses = boto3.client("ses", **aws_credentials)
        ses.verify_email_identity(EmailAddress=SENDER)
        yield ses


@pytest.fixture
def mock_dynamodb(aws_credentials):
    """Create a mocked outcomes table."""
    with mock_aws():
        dynamodb = boto3.resource("dynamodb", **aws_credentials)
        yield _create_outcomes_table(dynamodb)


@pytest.fixture
def mock_aws_all(aws_credentials):
    """
    Mock all AWS services used by the pipeline.

    Provides a complete mocked AWS environment.
    """
    with mock_aws():
        s3 = boto3.client("s3", **aws_credentials)
        s3.create_bucket(Bucket=BUCKET_NAME)

        ses = boto3.client("ses", **aws_credentials)
        ses.verify_email_identity(EmailAddress=SENDER)

        dynamodb = boto3.resource("dynamodb", **aws_credentials)
        table = _create_outcomes_table(dynamodb)

        yield {
            "s3": s3,
            "ses": ses,
            "table": table,
        }


# --- Event Fixtures ---


@pytest.fixture
def submission_message() -> dict[str, Any]:
    """Sample submission notification body."""
    return {
        "userEmail": "jane.doe@example.com",
        "submission_url": SUBMISSION_URL,
        "firstName": "Jane",
        "lastName": "Doe",
        "assignmentName": "HW1",
        "submissionTime": "2024-01-02T03:04:05.678Z",
    }


@pytest.fixture
def sns_envelope(submission_message: dict[str, Any]) -> dict[str, Any]:
    """Single-record SNS envelope carrying the sample message."""
    return build_sns_envelope(submission_message)


@pytest.fixture
def submission_event(submission_message: dict[str, Any]):
    """Decoded sample SubmissionEvent."""
    from submissions.models.events import SubmissionEvent

    return SubmissionEvent.model_validate(submission_message)


# --- HTTP Fixtures ---


@pytest.fixture
def make_response() -> Callable[..., requests.Response]:
    """Factory for fake HTTP responses."""
    return build_response


@pytest.fixture
def http_session() -> Callable[..., MagicMock]:
    """Factory for a fake requests.Session returning a response or raising."""

    def _session(response: requests.Response | None = None, error: Exception | None = None):
        session = MagicMock(spec=requests.Session)
        if error is not None:
            session.get.side_effect = error
        else:
            session.get.return_value = response if response is not None else build_response()
        return session

    return _session
