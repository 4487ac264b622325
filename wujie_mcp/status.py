"""Task status taxonomy: maps raw remote status codes to task states.

The remote status domain is only partly documented, so the mapping is an
explicit table with an UNKNOWN default rather than a switch. Classification
is evaluated in a fixed precedence order, first match wins:

    1. integral_cost == 0        -> FAILED (account-level, e.g. no balance)
    2. succeeded + involve_yellow -> FAILED (content policy)
    3. succeeded                 -> SUCCEEDED
    4. failed / cancelled        -> FAILED / CANCELLED
    5. queued                    -> QUEUED
    6. generating                -> GENERATING
    7. anything else             -> UNKNOWN (never terminal)
"""

from dataclasses import dataclass
from enum import Enum

from wujie_mcp.interfaces import GenerateTaskInfo


class TaskState(Enum):
    QUEUED = "queued"
    GENERATING = "generating"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"
    UNKNOWN = "unknown"

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL

    @property
    def is_failure(self) -> bool:
        return self in (TaskState.FAILED, TaskState.CANCELLED)


_TERMINAL = frozenset({TaskState.SUCCEEDED, TaskState.FAILED, TaskState.CANCELLED})

# 0 submitted, 1 queued, 11 submitted (alt), 2 generating, 4 done,
# 3 / 12 generation failed, -1 revoked.
STATUS_TABLE: dict[int, TaskState] = {
    0: TaskState.QUEUED,
    1: TaskState.QUEUED,
    11: TaskState.QUEUED,
    2: TaskState.GENERATING,
    4: TaskState.SUCCEEDED,
    3: TaskState.FAILED,
    12: TaskState.FAILED,
    -1: TaskState.CANCELLED,
}

POLICY_VIOLATION_MESSAGE = "Generated image was flagged as NSFW and withheld"
ZERO_COST_MESSAGE = "Insufficient balance"
UNKNOWN_ERROR_MESSAGE = "unknown error"


def state_for_code(code: int) -> TaskState:
    return STATUS_TABLE.get(code, TaskState.UNKNOWN)


@dataclass(frozen=True)
class TaskSnapshot:
    """Classified view of one query response."""

    key: str
    state: TaskState
    status_code: int
    artifact_url: str | None = None
    mini_artifact_url: str | None = None
    cost: float | None = None
    failure: str | None = None
    failure_code: int | None = None


def classify(key: str, info: GenerateTaskInfo) -> TaskSnapshot:
    """Classify a task record. Pure: same input, same snapshot."""
    state = state_for_code(info.status)
    base = {"key": key, "status_code": info.status, "cost": info.integral_cost}

    # A missing cost field is not a zero cost.
    if info.integral_cost is not None and info.integral_cost == 0:
        return TaskSnapshot(
            state=TaskState.FAILED,
            failure=info.integral_cost_message or ZERO_COST_MESSAGE,
            **base,
        )

    if state is TaskState.SUCCEEDED:
        if info.involve_yellow:
            return TaskSnapshot(
                state=TaskState.FAILED, failure=POLICY_VIOLATION_MESSAGE, **base
            )
        return TaskSnapshot(
            state=TaskState.SUCCEEDED,
            artifact_url=info.picture_url,
            mini_artifact_url=info.mini_picture_url,
            **base,
        )

    if state.is_failure:
        detail = info.fail_message
        cause = detail.fail_message if detail and detail.fail_message else None
        return TaskSnapshot(
            state=state,
            failure=cause or UNKNOWN_ERROR_MESSAGE,
            failure_code=detail.fail_code if detail else None,
            **base,
        )

    return TaskSnapshot(state=state, **base)
