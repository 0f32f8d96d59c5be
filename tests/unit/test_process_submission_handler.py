"""
Unit tests for ProcessSubmission Lambda handler.

Tests cover:
- Malformed envelopes: 400 without side effects
- Valid envelopes: 200 with the pipeline result, using settings-built clients
"""

import json
from types import SimpleNamespace
from unittest.mock import patch

import pytest

from lambdas.process_submission.handler import lambda_handler
from tests.utils.event_generator import build_sns_envelope
from tests.utils.fakes import BUCKET_NAME


@pytest.fixture
def lambda_context():
    return SimpleNamespace(aws_request_id="req-0001")


class TestMalformedEvents:
    """Decoder failures abort before any side effect."""

    @pytest.mark.parametrize(
        "event",
        [
            {},
            {"Records": []},
            build_sns_envelope("{broken"),
            build_sns_envelope({"userEmail": "jane@example.com"}),
        ],
    )
    def test_returns_400(self, event, lambda_context):
        with patch("lambdas.process_submission.handler.SubmissionPipeline") as pipeline_cls:
            response = lambda_handler(event, lambda_context)

        assert response["statusCode"] == 400
        assert "Malformed submission event" in json.loads(response["body"])["error"]
        pipeline_cls.assert_not_called()

    def test_missing_field_details_in_body(self, submission_message, lambda_context):
        del submission_message["submissionTime"]

        response = lambda_handler(build_sns_envelope(submission_message), lambda_context)

        details = json.loads(response["body"])["details"]
        assert any("submissionTime" in err for err in details["errors"])


class TestValidEvents:
    """Decoded events run through the pipeline."""

    def test_success_response(self, mock_aws_all, http_session, sns_envelope, lambda_context):
        with patch("submissions.tools.fetch._get_session", return_value=http_session()):
            response = lambda_handler(sns_envelope, lambda_context)

        assert response["statusCode"] == 200
        body = json.loads(response["body"])
        assert body["status"] == "success"
        assert body["stage"] == "RECORDED"
        assert body["notified"] is True
        assert body["recorded"] is True
        assert body["storage_uri"] == f"s3://{BUCKET_NAME}/Jane_Doe_HW1_2024-01-02T03-04-05-678Z"

        item = mock_aws_all["table"].get_item(Key={"id": body["record_id"]})["Item"]
        assert item["status"] == "success"

    def test_failure_still_returns_200(
        self, mock_aws_all, http_session, make_response, sns_envelope, lambda_context
    ):
        session = http_session(make_response(content_type="application/pdf"))
        with patch("submissions.tools.fetch._get_session", return_value=session):
            response = lambda_handler(sns_envelope, lambda_context)

        assert response["statusCode"] == 200
        body = json.loads(response["body"])
        assert body["status"] == "failure"
        assert body["storage_uri"] is None

    def test_persistence_failure_still_returns_200(
        self, mock_aws_all, http_session, sns_envelope, lambda_context
    ):
        mock_aws_all["table"].delete()

        with patch("submissions.tools.fetch._get_session", return_value=http_session()):
            response = lambda_handler(sns_envelope, lambda_context)

        assert response["statusCode"] == 200
        body = json.loads(response["body"])
        assert body["recorded"] is False
        assert body["stage"] == "NOTIFIED"

    def test_only_first_record_processed(
        self, mock_aws_all, http_session, submission_message, lambda_context
    ):
        other = dict(submission_message, firstName="John")
        envelope = build_sns_envelope(submission_message, other)

        with patch("submissions.tools.fetch._get_session", return_value=http_session()):
            lambda_handler(envelope, lambda_context)

        assert len(mock_aws_all["table"].scan()["Items"]) == 1
        keys = [
            obj["Key"]
            for obj in mock_aws_all["s3"].list_objects_v2(Bucket=BUCKET_NAME)["Contents"]
        ]
        assert keys == ["Jane_Doe_HW1_2024-01-02T03-04-05-678Z"]

    def test_context_without_request_id(self, mock_aws_all, http_session, sns_envelope):
        with patch("submissions.tools.fetch._get_session", return_value=http_session()):
            response = lambda_handler(sns_envelope, None)

        assert response["statusCode"] == 200
