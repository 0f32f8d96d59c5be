"""
Submission Pipeline

Sequences fetch → validate → store → notify → record for one decoded
submission event and owns the in-progress OutcomeRecord.

Every run ends with exactly one notification attempt and one persistence
attempt. Rejections and upload failures become the failure email; send and
persistence failures are logged and never escalated.
"""

from dataclasses import dataclass

import requests
import structlog
from botocore.exceptions import BotoCoreError, ClientError

from lambdas.process_submission.templates import render_failure, render_success
from submissions.config import Settings, get_settings
from submissions.exceptions import (
    NotificationError,
    PersistenceFailedError,
    SubmissionRejectedError,
    UploadFailedError,
)
from submissions.models.events import SubmissionEvent
from submissions.models.outcome import OutcomeRecord, OutcomeStatus
from submissions.state_machine import PipelineStage, validate_transition
from submissions.tools.dynamodb import record_outcome
from submissions.tools.email import send_notification
from submissions.tools.fetch import fetch_submission
from submissions.tools.s3 import build_object_key, get_submission_url, stream_submission

log = structlog.get_logger()


@dataclass(frozen=True)
class PipelineResult:
    """Outcome of one pipeline run."""

    stage: PipelineStage
    record: OutcomeRecord
    storage_uri: str | None = None
    message_id: str | None = None
    recorded: bool = False

    @property
    def status(self) -> OutcomeStatus | None:
        return self.record.status

    @property
    def notified(self) -> bool:
        return self.message_id is not None

    def to_dict(self) -> dict:
        return {
            "status": self.status.value if self.status else None,
            "record_id": self.record.id,
            "stage": self.stage.value,
            "storage_uri": self.storage_uri,
            "notified": self.notified,
            "recorded": self.recorded,
        }


class SubmissionPipeline:
    """
    Orchestrates a single submission.

    Collaborators are injected so tests and local runs can substitute
    fakes; any left as None falls back to a client built from settings.
    The pipeline keeps no per-run state, so one instance may serve
    several invocations.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        http_session: requests.Session | None = None,
        s3_client=None,
        ses_client=None,
        table=None,
    ) -> None:
        self.settings = settings or get_settings()
        self.http_session = http_session
        self.s3_client = s3_client
        self.ses_client = ses_client
        self.table = table

    def _advance(
        self,
        current: PipelineStage,
        new: PipelineStage,
        record_id: str,
    ) -> PipelineStage:
        validate_transition(current, new)
        log.debug(
            "pipeline_stage_changed",
            record_id=record_id,
            from_stage=current.value,
            to_stage=new.value,
        )
        return new

    def _storage_reference(self, storage_uri: str) -> str:
        """Presigned link when enabled, otherwise the s3:// URI."""
        expires_in = self.settings.s3_presign_expiry_seconds
        if not expires_in:
            return storage_uri
        try:
            return get_submission_url(
                storage_uri,
                expires_in=expires_in,
                client=self.s3_client,
            )
        except (ClientError, BotoCoreError, ValueError) as e:
            log.warning(
                "presign_failed_using_s3_uri",
                storage_uri=storage_uri,
                error=str(e),
            )
            return storage_uri

    def _store(self, event: SubmissionEvent, object_key: str) -> str:
        """
        Fetch, validate and stream the submission into S3.

        Raises:
            SubmissionRejectedError: Validation, fetch or upload failure
        """
        fetched = fetch_submission(
            event.submission_url,
            session=self.http_session,
            timeout=self.settings.http_timeout,
            expected_content_type=self.settings.expected_content_type,
        )
        try:
            return stream_submission(
                fetched.stream,
                object_key,
                content_type=fetched.content_type,
                bucket=self.settings.s3_bucket_name,
                client=self.s3_client,
            )
        finally:
            fetched.close()

    def _notify(self, record: OutcomeRecord) -> str | None:
        """Best-effort send; failures are logged and swallowed."""
        try:
            return send_notification(
                record.receiver_email,
                record.subject,
                record.body,
                from_address=record.sender_email,
                from_name=self.settings.ses_from_name,
                configuration_set=self.settings.ses_configuration_set,
                client=self.ses_client,
            )
        except NotificationError as e:
            log.warning(
                "notification_send_failed",
                record_id=record.id,
                recipient=record.receiver_email,
                error=str(e),
            )
            return None

    def _record(self, record: OutcomeRecord) -> bool:
        try:
            record_outcome(record, table=self.table)
        except PersistenceFailedError as e:
            log.error(
                "outcome_persistence_failed",
                record_id=record.id,
                status=record.status.value if record.status else None,
                error=str(e),
            )
            return False
        return True

    def run(self, event: SubmissionEvent) -> PipelineResult:
        """
        Process one decoded submission event.

        Returns:
            PipelineResult describing the final stage and the persisted record
        """
        storage_key = event.storage_key
        record = OutcomeRecord.pending(
            sender_email=self.settings.ses_from_address,
            receiver_email=event.submitter_email,
            storage_key=storage_key,
        )
        stage = PipelineStage.RECEIVED

        log.info(
            "submission_pipeline_started",
            record_id=record.id,
            submitter_email=event.submitter_email,
            assignment_name=event.assignment_name,
            storage_key=storage_key,
        )

        stage = self._advance(stage, PipelineStage.VALIDATING, record.id)
        object_key = build_object_key(storage_key, prefix=self.settings.s3_submissions_prefix)

        storage_uri: str | None = None
        failure: SubmissionRejectedError | None = None
        try:
            storage_uri = self._store(event, object_key)
        except UploadFailedError as e:
            # Validation passed before the copy started
            stage = self._advance(stage, PipelineStage.VALIDATED, record.id)
            stage = self._advance(stage, PipelineStage.UPLOAD_FAILED, record.id)
            failure = e
        except SubmissionRejectedError as e:
            stage = self._advance(stage, PipelineStage.REJECTED, record.id)
            failure = e
        else:
            stage = self._advance(stage, PipelineStage.VALIDATED, record.id)
            stage = self._advance(stage, PipelineStage.STORED, record.id)

        if failure is None:
            subject, body = render_success(event, self._storage_reference(storage_uri))
            record = record.resolve(OutcomeStatus.SUCCESS, subject, body)
        else:
            log.info(
                "submission_rejected",
                record_id=record.id,
                stage=stage.value,
                error_type=type(failure).__name__,
                error=str(failure),
            )
            subject, body = render_failure(event, failure.user_message)
            record = record.resolve(OutcomeStatus.FAILURE, subject, body)

        message_id = self._notify(record)
        stage = self._advance(stage, PipelineStage.NOTIFIED, record.id)

        recorded = self._record(record)
        if recorded:
            stage = self._advance(stage, PipelineStage.RECORDED, record.id)

        log.info(
            "submission_pipeline_finished",
            record_id=record.id,
            status=record.status.value,
            stage=stage.value,
            storage_uri=storage_uri,
            notified=message_id is not None,
            recorded=recorded,
        )

        return PipelineResult(
            stage=stage,
            record=record,
            storage_uri=storage_uri,
            message_id=message_id,
            recorded=recorded,
        )
