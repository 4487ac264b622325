"""Status reconciler: turns a fire-and-forget remote job into a bounded wait.

Two independent budgets bound one reconciliation call:

- a deadline of ``expected_second * deadline_multiplier`` from the start,
  which follows the remote service's own estimate;
- a poll allowance of ``max_poll_seconds``, decremented by the poll interval
  on every iteration, which caps caller-side wait when the estimate is wrong.

Whichever runs out first ends the loop with REQUEST_TIMEOUT. Iterations are
strictly sequential and no query is issued once a terminal state is seen.
"""

import asyncio
import logging
import time
from typing import Callable

from pydantic import ValidationError

from wujie_mcp.config import PollSettings
from wujie_mcp.formatting import format_failure
from wujie_mcp.interfaces import GenerateTaskInfo, TaskGateway
from wujie_mcp.result import Err, ErrorKind, Ok, Result
from wujie_mcp.status import TaskSnapshot, TaskState, classify

logger = logging.getLogger(__name__)


class PollBudget:
    """Per-call polling budget. Never shared, never persisted."""

    def __init__(self, expected_seconds: float, settings: PollSettings, now: float) -> None:
        if expected_seconds > 0:
            self.timeout = expected_seconds * settings.deadline_multiplier
        else:
            # No usable estimate: the poll ceiling is the only bound.
            self.timeout = settings.max_poll_seconds
        self.started_at = now
        self.deadline = now + self.timeout
        self.ceiling = settings.max_poll_seconds
        self.remaining_allowance = settings.max_poll_seconds
        self.interval = settings.interval

    def tick(self) -> None:
        self.remaining_allowance -= self.interval

    def deadline_passed(self, now: float) -> bool:
        return now >= self.deadline

    def allowance_spent(self) -> bool:
        return self.remaining_allowance <= 0

    def exhausted(self, now: float) -> bool:
        return self.deadline_passed(now) or self.allowance_spent()


async def _pause(seconds: float, cancel: asyncio.Event | None) -> bool:
    """Sleep for the poll interval. Returns True if cancel was signalled."""
    if cancel is None:
        await asyncio.sleep(seconds)
        return False
    if cancel.is_set():
        return True
    try:
        await asyncio.wait_for(cancel.wait(), timeout=seconds)
    except asyncio.TimeoutError:
        return False
    return True


class StatusReconciler:
    def __init__(
        self,
        gateway: TaskGateway,
        settings: PollSettings,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._gateway = gateway
        self._settings = settings
        self._clock = clock

    async def query_once(self, key: str) -> Result[TaskSnapshot]:
        """Single query + classification. Terminal failures come back as Ok snapshots."""
        return await self._query(key)

    async def reconcile(
        self,
        key: str,
        expected_seconds: float,
        cancel: asyncio.Event | None = None,
    ) -> Result[TaskSnapshot]:
        """Poll until SUCCEEDED (Ok), FAILED/CANCELLED (Err) or budget exhaustion (Err)."""
        budget = PollBudget(expected_seconds, self._settings, self._clock())
        logger.info(
            "reconcile %s: timeout=%.1fs ceiling=%.1fs interval=%.1fs",
            key,
            budget.timeout,
            budget.ceiling,
            budget.interval,
        )
        polls = 0
        while True:
            if await _pause(budget.interval, cancel):
                logger.info("reconcile %s: aborted after %d poll(s)", key, polls)
                return Err(ErrorKind.INTERNAL_ERROR, f"Polling for task {key} was aborted")

            result = await self._query(key)
            polls += 1
            if not result.ok:
                logger.warning("reconcile %s: query failed: %s", key, result.message)
                return result

            snapshot = result.value
            if snapshot.state is TaskState.SUCCEEDED:
                logger.info("reconcile %s: succeeded after %d poll(s)", key, polls)
                return Ok(snapshot)
            if snapshot.state.is_failure:
                logger.info(
                    "reconcile %s: %s after %d poll(s): %s",
                    key,
                    snapshot.state.value,
                    polls,
                    snapshot.failure,
                )
                return Err(ErrorKind.INTERNAL_ERROR, format_failure(snapshot))

            budget.tick()
            now = self._clock()
            if budget.exhausted(now):
                which = "deadline" if budget.deadline_passed(now) else "poll ceiling"
                logger.warning(
                    "reconcile %s: %s reached after %d poll(s), last state %s",
                    key,
                    which,
                    polls,
                    snapshot.state.value,
                )
                return Err(
                    ErrorKind.REQUEST_TIMEOUT,
                    f"Timed out waiting for task {key} after {now - budget.started_at:.0f}s "
                    f"(timeout {budget.timeout:g}s, poll ceiling {budget.ceiling:g}s); "
                    f"last state: {snapshot.state.value}",
                )

    async def _query(self, key: str) -> Result[TaskSnapshot]:
        result = await self._gateway.query_task(key)
        if not result.ok:
            return result
        envelope = result.value
        if not envelope.ok:
            return Err(
                ErrorKind.INTERNAL_ERROR,
                f"Failed to query task result: {envelope.message or envelope.code}",
            )
        try:
            info = GenerateTaskInfo.model_validate(envelope.data)
        except ValidationError as e:
            logger.warning("query %s: unexpected task record: %s", key, e)
            return Err(ErrorKind.INTERNAL_ERROR, f"Malformed task record for {key}")

        snapshot = classify(key, info)
        if snapshot.state is TaskState.UNKNOWN:
            logger.warning("query %s: unmapped status code %d", key, info.status)
        else:
            logger.debug("query %s: status=%d -> %s", key, info.status, snapshot.state.value)
        return Ok(snapshot)
