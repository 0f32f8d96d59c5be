"""
Pipeline State Machine

Defines the stages a single submission invocation moves through and the
transitions allowed between them.
"""

from enum import Enum
from typing import Final

import structlog

from submissions.exceptions import InvalidStageTransitionError

log = structlog.get_logger()


class PipelineStage(str, Enum):
    """
    Pipeline stage enum.

    Stages are mutually exclusive and represent how far one invocation
    has progressed.
    """

    RECEIVED = "RECEIVED"
    """Event decoded, nothing fetched yet."""

    VALIDATING = "VALIDATING"
    """Storage key derived, remote file being fetched and checked."""

    VALIDATED = "VALIDATED"
    """Remote file declares a ZIP archive with non-zero length."""

    REJECTED = "REJECTED"
    """Fetch failed or the remote file failed validation."""

    STORED = "STORED"
    """Payload streamed into object storage."""

    UPLOAD_FAILED = "UPLOAD_FAILED"
    """Object storage reported an error during the copy."""

    NOTIFIED = "NOTIFIED"
    """Outcome email attempted (best effort)."""

    RECORDED = "RECORDED"
    """Outcome record persisted."""


# Key: current stage, Value: set of allowed next stages
VALID_TRANSITIONS: Final[dict[PipelineStage, frozenset[PipelineStage]]] = {
    PipelineStage.RECEIVED: frozenset({
        PipelineStage.VALIDATING,
    }),
    PipelineStage.VALIDATING: frozenset({
        PipelineStage.VALIDATED,
        PipelineStage.REJECTED,
    }),
    PipelineStage.VALIDATED: frozenset({
        PipelineStage.STORED,
        PipelineStage.UPLOAD_FAILED,
    }),
    PipelineStage.REJECTED: frozenset({
        PipelineStage.NOTIFIED,
    }),
    PipelineStage.STORED: frozenset({
        PipelineStage.NOTIFIED,
    }),
    PipelineStage.UPLOAD_FAILED: frozenset({
        PipelineStage.NOTIFIED,
    }),
    PipelineStage.NOTIFIED: frozenset({
        PipelineStage.RECORDED,
    }),
    PipelineStage.RECORDED: frozenset(),  # Terminal
}


def validate_transition(
    current_stage: PipelineStage | str,
    new_stage: PipelineStage | str,
    *,
    raise_on_invalid: bool = True,
) -> bool:
    """
    Validate that a stage transition is allowed.

    Args:
        current_stage: Current pipeline stage
        new_stage: Desired next stage
        raise_on_invalid: If True, raise exception on invalid transition

    Returns:
        True if transition is valid

    Raises:
        InvalidStageTransitionError: If transition is invalid and raise_on_invalid=True
    """
    current = PipelineStage(current_stage)
    target = PipelineStage(new_stage)
    allowed = VALID_TRANSITIONS[current]

    if target in allowed:
        return True

    log.warning(
        "invalid_stage_transition",
        current_stage=current.value,
        new_stage=target.value,
        allowed=[s.value for s in allowed],
    )

    if raise_on_invalid:
        raise InvalidStageTransitionError(
            current_stage=current.value,
            new_stage=target.value,
            allowed_transitions=sorted(s.value for s in allowed),
        )
    return False
