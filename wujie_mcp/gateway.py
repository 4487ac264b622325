"""HTTP gateway to the Wujie open API. One request per call, no retries."""

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from wujie_mcp.config import WujieConfig
from wujie_mcp.interfaces import Envelope
from wujie_mcp.result import Err, ErrorKind, Ok, Result

logger = logging.getLogger(__name__)


def create_client(config: WujieConfig) -> httpx.AsyncClient:
    """Shared client for all tool calls. Never reconfigured per call."""
    return httpx.AsyncClient(
        base_url=config.base_url,
        headers={
            "Authorization": f"Bearer {config.api_key}",
            "Content-Type": "application/json",
        },
        timeout=config.request_timeout,
    )


class WujieGateway:
    """TaskGateway over an injected httpx.AsyncClient."""

    def __init__(self, config: WujieConfig, client: httpx.AsyncClient) -> None:
        self._endpoints = config.endpoints
        self._client = client

    async def create_task(self, payload: dict[str, Any]) -> Result[Envelope]:
        return await self._request("POST", self._endpoints.create_task, json=payload)

    async def query_task(self, key: str) -> Result[Envelope]:
        return await self._request("GET", self._endpoints.query_task, params={"key": key})

    async def list_models(self) -> Result[Envelope]:
        return await self._request("GET", self._endpoints.model_infos)

    async def _request(self, method: str, path: str, **kwargs: Any) -> Result[Envelope]:
        try:
            resp = await self._client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            logger.warning("wujie: %s %s timed out: %s", method, path, e)
            return Err(ErrorKind.INTERNAL_ERROR, f"Request to {path} timed out")
        except httpx.HTTPError as e:
            logger.warning("wujie: %s %s failed: %s", method, path, e)
            return Err(ErrorKind.INTERNAL_ERROR, f"Request to {path} failed: {e}")

        if resp.status_code >= 400:
            logger.warning("wujie: %s %s -> HTTP %d", method, path, resp.status_code)
            return Err(
                ErrorKind.INTERNAL_ERROR,
                f"Request to {path} failed with HTTP {resp.status_code}",
            )
        try:
            envelope = Envelope.model_validate(resp.json())
        except (ValueError, ValidationError) as e:
            logger.warning("wujie: %s %s returned a malformed body: %s", method, path, e)
            return Err(ErrorKind.INTERNAL_ERROR, f"Malformed response from {path}")
        logger.debug("wujie: %s %s -> code=%s", method, path, envelope.code)
        return Ok(envelope)
