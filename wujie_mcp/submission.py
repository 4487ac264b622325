"""Task submission: one create request, no retries."""

import logging
from dataclasses import dataclass

from pydantic import ValidationError

from wujie_mcp.config import GenerationDefaults
from wujie_mcp.interfaces import GenerateImageResult, GenerateParams, TaskGateway
from wujie_mcp.result import Err, ErrorKind, Ok, Result

logger = logging.getLogger(__name__)

EMPTY_KEY_MESSAGE = "Failed to create task: returned task key is empty"


@dataclass(frozen=True)
class SubmittedTask:
    key: str
    expected_seconds: float
    expected_cost: float | None = None
    batch_task_key: str | None = None


async def submit_task(
    gateway: TaskGateway,
    params: GenerateParams,
    defaults: GenerationDefaults,
) -> Result[SubmittedTask]:
    """Create a generation task and return its key and expected duration."""
    payload = params.to_payload(defaults)
    logger.info(
        "submit: model=%s num=%s size=%sx%s",
        payload["model"],
        payload["num"],
        payload["width"],
        payload["height"],
    )
    result = await gateway.create_task(payload)
    if not result.ok:
        return result

    envelope = result.value
    if not envelope.ok:
        logger.warning("submit rejected: code=%s message=%s", envelope.code, envelope.message)
        return Err(
            ErrorKind.INTERNAL_ERROR,
            f"Failed to create task: {envelope.message or envelope.code}",
        )

    try:
        data = GenerateImageResult.model_validate(envelope.data or {})
    except ValidationError as e:
        logger.warning("submit: unexpected create response: %s", e)
        return Err(ErrorKind.INTERNAL_ERROR, EMPTY_KEY_MESSAGE)

    first = data.results[0] if data.results else None
    if first is None or not first.key:
        return Err(ErrorKind.INTERNAL_ERROR, EMPTY_KEY_MESSAGE)

    logger.info("submit: task %s created, expected %.0fs", first.key, first.expected_second)
    return Ok(
        SubmittedTask(
            key=first.key,
            expected_seconds=first.expected_second,
            expected_cost=data.expected_integral_cost,
            batch_task_key=first.batch_task_key,
        )
    )
