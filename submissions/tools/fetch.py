"""
Remote Fetch Tools

Streams a submitted file from its URL and validates the declared headers
before any bytes are handed to storage. The body is never buffered here.
"""

from dataclasses import dataclass, field
from typing import BinaryIO

import requests
import structlog

from submissions.config import get_settings
from submissions.exceptions import (
    EmptyPayloadError,
    FetchFailedError,
    InvalidFormatError,
)

log = structlog.get_logger()


@dataclass(frozen=True)
class FetchedSubmission:
    """
    Validated, not yet consumed remote file.

    Call close() once the stream has been copied (or abandoned) to release
    the underlying connection.
    """

    url: str
    stream: BinaryIO
    content_type: str
    content_length: int | None
    response: requests.Response = field(repr=False)
    # Set only when fetch_submission opened the session itself
    session: requests.Session | None = field(default=None, repr=False)

    def close(self) -> None:
        _release(self.response, self.session)


def _get_session() -> requests.Session:
    """Get HTTP session."""
    return requests.Session()


def _release(
    response: requests.Response | None,
    owned_session: requests.Session | None,
) -> None:
    """Close the response and, if fetch_submission opened it, the session."""
    try:
        if response is not None:
            response.close()
    finally:
        if owned_session is not None:
            owned_session.close()


def _media_type(content_type_header: str | None) -> str | None:
    """Strip parameters (e.g. '; charset=binary') and normalize case."""
    if not content_type_header:
        return None
    media_type = content_type_header.split(";", 1)[0].strip().lower()
    return media_type or None


def _declared_length(content_length_header: str | None) -> int | None:
    """Parse Content-Length; a missing or unparsable header counts as undeclared."""
    if content_length_header is None:
        return None
    try:
        return int(content_length_header)
    except ValueError:
        log.warning("invalid_content_length_header", value=content_length_header)
        return None


def fetch_submission(
    url: str,
    *,
    session: requests.Session | None = None,
    timeout: tuple[float, float] | None = None,
    expected_content_type: str | None = None,
) -> FetchedSubmission:
    """
    Open a streaming GET for a submitted file and validate its headers.

    Checks run in a fixed order: transport errors and non-2xx statuses,
    then the declared content type, then the declared length. The content
    type is checked first so an unrecognized type is reported even when
    the length is also zero.

    Args:
        url: Absolute URL of the submitted file
        session: Override HTTP session. A session opened here is closed
            with the returned FetchedSubmission or before raising.
        timeout: (connect, read) timeout in seconds (default: from settings)
        expected_content_type: Override expected media type (default: from settings)

    Returns:
        FetchedSubmission wrapping the unread response body

    Raises:
        FetchFailedError: On DNS, connection, timeout or non-2xx responses
        InvalidFormatError: If the declared media type is not the expected one
        EmptyPayloadError: If Content-Length is declared as zero
    """
    settings = get_settings()
    owned_session = None if session is not None else _get_session()
    http = session if session is not None else owned_session
    request_timeout = timeout or settings.http_timeout
    expected = (expected_content_type or settings.expected_content_type).lower()

    log.info("fetching_submission", url=url)

    try:
        response = http.get(url, stream=True, timeout=request_timeout)
    except requests.RequestException as e:
        log.error(
            "submission_fetch_failed",
            url=url,
            error_type=type(e).__name__,
            error=str(e),
        )
        _release(None, owned_session)
        raise FetchFailedError(url=url, error_message=str(e)) from e

    try:
        response.raise_for_status()
    except requests.HTTPError as e:
        _release(response, owned_session)
        log.error(
            "submission_fetch_bad_status",
            url=url,
            status_code=response.status_code,
        )
        raise FetchFailedError(
            url=url,
            status_code=response.status_code,
            error_message=str(e),
        ) from e

    content_type = _media_type(response.headers.get("Content-Type"))
    if content_type != expected:
        _release(response, owned_session)
        log.warning(
            "submission_invalid_format",
            url=url,
            content_type=content_type,
            expected=expected,
        )
        raise InvalidFormatError(
            url=url,
            content_type=content_type,
            expected_content_type=expected,
        )

    content_length = _declared_length(response.headers.get("Content-Length"))
    if content_length == 0:
        _release(response, owned_session)
        log.warning("submission_empty_payload", url=url)
        raise EmptyPayloadError(url=url)

    # Let urllib3 undo any Content-Encoding while boto3 reads the stream
    response.raw.decode_content = True

    log.info(
        "submission_validated",
        url=url,
        content_type=content_type,
        content_length=content_length,
    )

    return FetchedSubmission(
        url=url,
        stream=response.raw,
        content_type=content_type,
        content_length=content_length,
        response=response,
        session=owned_session,
    )
