"""
Email Tools

SES tool for sending plain-text outcome notifications to submitters.
"""

import boto3
from botocore.exceptions import BotoCoreError, ClientError
import structlog

from submissions.config import get_settings
from submissions.exceptions import NotificationError

log = structlog.get_logger()


def _get_client():
    """Get SES client."""
    settings = get_settings()
    return boto3.client("ses", **settings.ses_config)


def format_source(from_address: str, from_name: str | None = None) -> str:
    """Format sender with optional display name."""
    if from_name:
        return f"{from_name} <{from_address}>"
    return from_address


def send_notification(
    to_address: str,
    subject: str,
    body_text: str,
    *,
    from_address: str | None = None,
    from_name: str | None = None,
    configuration_set: str | None = None,
    client=None,
) -> str:
    """
    Send a plain-text email via SES.

    Args:
        to_address: Recipient email address
        subject: Email subject
        body_text: Plain text body
        from_address: Override from address
        from_name: Override from display name
        configuration_set: Override configuration set
        client: Override SES client

    Returns:
        SES message ID

    Raises:
        NotificationError: If send fails
    """
    settings = get_settings()
    ses = client or _get_client()

    sender = from_address or settings.ses_from_address
    sender_name = from_name or settings.ses_from_name
    config_set = configuration_set or settings.ses_configuration_set

    send_params = {
        "Source": format_source(sender, sender_name),
        "Destination": {"ToAddresses": [to_address]},
        "Message": {
            "Subject": {"Data": subject, "Charset": "UTF-8"},
            "Body": {"Text": {"Data": body_text, "Charset": "UTF-8"}},
        },
    }

    if config_set:
        send_params["ConfigurationSetName"] = config_set

    log.info(
        "sending_notification",
        to=to_address,
        subject=subject[:50],
    )

    try:
        response = ses.send_email(**send_params)
    except ClientError as e:
        error_code = e.response["Error"]["Code"]
        error_message = e.response["Error"]["Message"]

        log.error(
            "ses_send_failed",
            to=to_address,
            error_code=error_code,
            error_message=error_message,
        )

        raise NotificationError(
            recipient=to_address,
            error_message=f"{error_code}: {error_message}",
        ) from e
    except BotoCoreError as e:
        log.error("ses_send_failed", to=to_address, error=str(e))
        raise NotificationError(recipient=to_address, error_message=str(e)) from e

    message_id = response["MessageId"]

    log.info(
        "notification_sent",
        message_id=message_id,
        to=to_address,
    )

    return message_id
