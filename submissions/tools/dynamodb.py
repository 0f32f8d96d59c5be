"""
DynamoDB Tools

Persistence of outcome records in the SubmissionOutcomes table.
Each invocation writes exactly one item keyed by a fresh id.
"""

import boto3
from botocore.exceptions import BotoCoreError, ClientError
import structlog

from submissions.config import get_settings
from submissions.exceptions import PersistenceFailedError
from submissions.models.outcome import OutcomeRecord

log = structlog.get_logger()


def _get_table():
    """Get DynamoDB table resource."""
    settings = get_settings()
    dynamodb = boto3.resource("dynamodb", **settings.dynamodb_config)
    return dynamodb.Table(settings.dynamodb_table_name)


def record_outcome(record: OutcomeRecord, *, table=None) -> None:
    """
    Persist an outcome record.

    Args:
        record: Resolved outcome record
        table: Override DynamoDB table resource

    Raises:
        PersistenceFailedError: On DynamoDB operation failure
    """
    outcomes = table if table is not None else _get_table()
    table_name = getattr(outcomes, "name", get_settings().dynamodb_table_name)

    log.info(
        "recording_outcome",
        record_id=record.id,
        status=record.status.value if record.status else None,
    )

    try:
        outcomes.put_item(Item=record.to_dynamodb())
    except (ClientError, BotoCoreError) as e:
        log.error(
            "dynamodb_put_failed",
            record_id=record.id,
            table_name=table_name,
            error=str(e),
        )
        raise PersistenceFailedError(
            table_name=table_name,
            record_id=record.id,
            error_message=str(e),
        ) from e

    log.info("outcome_recorded", record_id=record.id)


def load_outcome(record_id: str, *, table=None) -> OutcomeRecord | None:
    """
    Load an outcome record by id.

    Returns:
        OutcomeRecord if found, None otherwise

    Raises:
        PersistenceFailedError: On DynamoDB operation failure
    """
    outcomes = table if table is not None else _get_table()
    table_name = getattr(outcomes, "name", get_settings().dynamodb_table_name)

    try:
        response = outcomes.get_item(Key={"id": record_id}, ConsistentRead=True)
    except (ClientError, BotoCoreError) as e:
        log.error(
            "dynamodb_get_failed",
            record_id=record_id,
            table_name=table_name,
            error=str(e),
        )
        raise PersistenceFailedError(
            table_name=table_name,
            record_id=record_id,
            error_message=str(e),
        ) from e

    item = response.get("Item")
    if not item:
        return None
    return OutcomeRecord.from_dynamodb(item)
