"""Tests for wujie_mcp.gateway over a mocked HTTP transport."""

import json

import httpx
import pytest

from wujie_mcp.config import WujieConfig
from wujie_mcp.gateway import WujieGateway, create_client
from wujie_mcp.result import Err, ErrorKind, Ok

BASE = "https://wujie.test"


@pytest.mark.asyncio
async def test_create_task_posts_json_with_bearer(httpx_mock, config: WujieConfig) -> None:
    httpx_mock.add_response(
        method="POST",
        url=f"{BASE}/wj-open/v2/ai/create",
        json={"code": 200, "data": {"results": [{"key": "abc123", "expected_second": 10}]}},
    )
    async with create_client(config) as client:
        result = await WujieGateway(config, client).create_task({"prompt": "fox", "model": 1018})

    assert isinstance(result, Ok)
    assert result.value.ok
    assert result.value.data["results"][0]["key"] == "abc123"

    request = httpx_mock.get_request()
    assert request.headers["Authorization"] == "Bearer test-key"
    assert json.loads(request.content) == {"prompt": "fox", "model": 1018}


@pytest.mark.asyncio
async def test_query_task_sends_key_param(httpx_mock, config: WujieConfig) -> None:
    httpx_mock.add_response(
        method="GET",
        url=f"{BASE}/wj-open/v2/ai/info?key=abc123",
        json={"code": 200, "data": {"status": 2, "integral_cost": 1}},
    )
    async with create_client(config) as client:
        result = await WujieGateway(config, client).query_task("abc123")

    assert isinstance(result, Ok)
    assert result.value.data["status"] == 2


@pytest.mark.asyncio
async def test_non_success_envelope_is_still_ok(httpx_mock, config: WujieConfig) -> None:
    httpx_mock.add_response(
        url=f"{BASE}/wj-open/v2/ai/model_base_infos",
        json={"code": 500, "message": "busy", "data": None},
    )
    async with create_client(config) as client:
        result = await WujieGateway(config, client).list_models()

    assert isinstance(result, Ok)
    assert not result.value.ok
    assert result.value.message == "busy"


@pytest.mark.asyncio
async def test_http_error_status(httpx_mock, config: WujieConfig) -> None:
    httpx_mock.add_response(url=f"{BASE}/wj-open/v2/ai/info?key=k", status_code=502)
    async with create_client(config) as client:
        result = await WujieGateway(config, client).query_task("k")

    assert isinstance(result, Err)
    assert result.kind is ErrorKind.INTERNAL_ERROR
    assert "502" in result.message


@pytest.mark.asyncio
async def test_transport_error(httpx_mock, config: WujieConfig) -> None:
    httpx_mock.add_exception(httpx.ConnectError("connection refused"))
    async with create_client(config) as client:
        result = await WujieGateway(config, client).query_task("k")

    assert isinstance(result, Err)
    assert result.kind is ErrorKind.INTERNAL_ERROR


@pytest.mark.asyncio
async def test_timeout(httpx_mock, config: WujieConfig) -> None:
    httpx_mock.add_exception(httpx.ReadTimeout("too slow"))
    async with create_client(config) as client:
        result = await WujieGateway(config, client).create_task({"prompt": "x"})

    assert isinstance(result, Err)
    assert "timed out" in result.message


@pytest.mark.asyncio
async def test_malformed_body(httpx_mock, config: WujieConfig) -> None:
    httpx_mock.add_response(url=f"{BASE}/wj-open/v2/ai/info?key=k", text="<html>oops</html>")
    async with create_client(config) as client:
        result = await WujieGateway(config, client).query_task("k")

    assert isinstance(result, Err)
    assert "Malformed" in result.message
