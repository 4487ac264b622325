"""Model catalog query: one request, no pagination, no caching."""

import logging

from pydantic import TypeAdapter, ValidationError

from wujie_mcp.interfaces import ModelInfo, TaskGateway
from wujie_mcp.result import Err, ErrorKind, Ok, Result

logger = logging.getLogger(__name__)

_MODEL_LIST = TypeAdapter(list[ModelInfo])


async def fetch_models(gateway: TaskGateway) -> Result[list[ModelInfo]]:
    result = await gateway.list_models()
    if not result.ok:
        return result
    envelope = result.value
    if not envelope.ok:
        return Err(
            ErrorKind.INTERNAL_ERROR,
            f"Failed to fetch model list: {envelope.message or envelope.code}",
        )
    try:
        models = _MODEL_LIST.validate_python(envelope.data or [])
    except ValidationError as e:
        logger.warning("model list: unexpected payload: %s", e)
        return Err(ErrorKind.INTERNAL_ERROR, "Failed to fetch model list: malformed payload")
    logger.debug("model list: %d model(s)", len(models))
    return Ok(models)
