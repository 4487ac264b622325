"""Tool dispatch: routes MCP tool calls to submission, reconciler and catalog.

This is the only layer that raises: every Err from below is converted into an
McpError here.
"""

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable

from mcp.shared.exceptions import McpError
from mcp.types import Tool
from pydantic import ValidationError

from wujie_mcp.catalog import fetch_models
from wujie_mcp.config import WujieConfig
from wujie_mcp.formatting import (
    format_model_table,
    format_status,
    format_submitted,
    format_success,
)
from wujie_mcp.interfaces import ALLOWED_DIMENSIONS, GenerateParams, TaskGateway
from wujie_mcp.reconciler import StatusReconciler
from wujie_mcp.result import Err, ErrorKind, Result, T
from wujie_mcp.submission import SubmittedTask, submit_task

logger = logging.getLogger(__name__)

_GENERATE_PROPERTIES: dict[str, Any] = {
    "prompt": {
        "type": "string",
        "description": "What to draw. Style and detail hints help.",
    },
    "model": {"type": "integer", "description": "Model code, see query_model_infos."},
    "num": {"type": "integer", "minimum": 1, "description": "Number of images."},
    "width": {"type": "integer", "enum": list(ALLOWED_DIMENSIONS)},
    "height": {"type": "integer", "enum": list(ALLOWED_DIMENSIONS)},
    "uc_prompt": {
        "type": "string",
        "description": "Negative prompt: things that must not appear in the image.",
    },
    "init_image_url": {"type": "string", "description": "Base image URL for img2img."},
    "steps": {"type": "integer", "minimum": 1, "description": "Sampling steps."},
    "cfg": {"type": "number", "minimum": 0, "description": "CFG scale (prompt adherence)."},
    "sampler_index": {"type": "integer", "description": "Sampler preset index."},
    "seed": {"type": "string", "description": "Seed for reproducible output."},
}


def tool_definitions() -> list[Tool]:
    generate_schema = {
        "type": "object",
        "properties": _GENERATE_PROPERTIES,
        "required": ["prompt"],
    }
    return [
        Tool(
            name="generate_image",
            description=(
                "Generate an image with Wujie AI and wait for the result. "
                "Returns the image URL and credits used."
            ),
            inputSchema=generate_schema,
        ),
        Tool(
            name="submit_generate_task",
            description=(
                "Create an image generation task without waiting. "
                "Returns a task key for query_generate_task."
            ),
            inputSchema=generate_schema,
        ),
        Tool(
            name="query_generate_task",
            description="Check progress and result of a generation task.",
            inputSchema={
                "type": "object",
                "properties": {
                    "key": {
                        "type": "string",
                        "description": "Task key returned when the task was created.",
                    }
                },
                "required": ["key"],
            },
        ),
        Tool(
            name="query_model_infos",
            description="List available models (model_code, model_desc).",
            inputSchema={"type": "object", "properties": {}},
        ),
    ]


def _unwrap(result: Result[T]) -> T:
    if isinstance(result, Err):
        raise result.to_mcp_error()
    return result.value


def _invalid(message: str) -> McpError:
    return Err(ErrorKind.INVALID_PARAMS, message).to_mcp_error()


def _parse_generate_params(arguments: dict[str, Any]) -> GenerateParams:
    try:
        return GenerateParams.model_validate(arguments)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'arguments'}: {err['msg']}"
            for err in e.errors()
        )
        raise _invalid(f"Invalid generate_image arguments: {problems}") from e


class ImageTools:
    """Caller-facing tools. One instance serves all concurrent calls."""

    def __init__(
        self,
        config: WujieConfig,
        gateway: TaskGateway,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._config = config
        self._gateway = gateway
        self._reconciler = StatusReconciler(gateway, config.polling, clock=clock)
        self._handlers: dict[str, Callable[[dict[str, Any]], Awaitable[str]]] = {
            "generate_image": self.generate_image,
            "submit_generate_task": self.submit_generate_task,
            "query_generate_task": self.query_generate_task,
            "query_model_infos": self.query_model_infos,
        }

    async def call(self, name: str, arguments: dict[str, Any] | None) -> str:
        handler = self._handlers.get(name)
        if handler is None:
            raise Err(ErrorKind.METHOD_NOT_FOUND, f"Unknown tool: {name}").to_mcp_error()
        try:
            return await handler(arguments or {})
        except McpError as e:
            logger.info("tool %s failed: %s", name, e.error.message)
            raise

    async def _submit(self, arguments: dict[str, Any]) -> SubmittedTask:
        params = _parse_generate_params(arguments)
        return _unwrap(await submit_task(self._gateway, params, self._config.defaults))

    async def generate_image(
        self,
        arguments: dict[str, Any],
        cancel: asyncio.Event | None = None,
    ) -> str:
        task = await self._submit(arguments)
        snapshot = _unwrap(
            await self._reconciler.reconcile(task.key, task.expected_seconds, cancel=cancel)
        )
        return format_success(snapshot)

    async def submit_generate_task(self, arguments: dict[str, Any]) -> str:
        task = await self._submit(arguments)
        return format_submitted(task.key, task.expected_seconds, task.expected_cost)

    async def query_generate_task(self, arguments: dict[str, Any]) -> str:
        key = arguments.get("key")
        if not isinstance(key, str) or not key.strip():
            raise _invalid("Query parameter 'key' must not be empty")
        snapshot = _unwrap(await self._reconciler.query_once(key.strip()))
        return format_status(snapshot)

    async def query_model_infos(self, arguments: dict[str, Any]) -> str:
        models = _unwrap(await fetch_models(self._gateway))
        if not models:
            return "No models available."
        return format_model_table(models)
