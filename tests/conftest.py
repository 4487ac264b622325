"""Shared fakes for gateway, clock and config."""

from typing import Any, Callable

import pytest

from wujie_mcp.config import PollSettings, WujieConfig
from wujie_mcp.interfaces import Envelope
from wujie_mcp.result import Ok, Result


def envelope(data: Any = None, code: int = 200, message: str | None = None) -> Ok[Envelope]:
    return Ok(Envelope(code=code, message=message, data=data))


def task_info(status: int, **fields: Any) -> Ok[Envelope]:
    """Query-task envelope; integral_cost defaults to a non-zero value."""
    data = {"status": status, "integral_cost": 1, **fields}
    return envelope(data)


def created(key: str = "abc123", expected_second: float = 10, **extra: Any) -> Ok[Envelope]:
    return envelope(
        {
            "results": [{"key": key, "expected_second": expected_second, **extra}],
            "expected_integral_cost": 5,
        }
    )


class FakeClock:
    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeGateway:
    """In-memory TaskGateway. The last query response repeats forever."""

    def __init__(
        self,
        create: Result[Envelope] | None = None,
        queries: list[Result[Envelope]] | None = None,
        models: Result[Envelope] | None = None,
        on_query: Callable[[], None] | None = None,
    ) -> None:
        self.create_response = create
        self.query_responses = list(queries or [])
        self.models_response = models
        self.on_query = on_query
        self.created: list[dict[str, Any]] = []
        self.queried: list[str] = []
        self.model_calls = 0

    async def create_task(self, payload: dict[str, Any]) -> Result[Envelope]:
        self.created.append(payload)
        assert self.create_response is not None, "unexpected create_task"
        return self.create_response

    async def query_task(self, key: str) -> Result[Envelope]:
        self.queried.append(key)
        if self.on_query is not None:
            self.on_query()
        assert self.query_responses, "unexpected query_task"
        if len(self.query_responses) > 1:
            return self.query_responses.pop(0)
        return self.query_responses[0]

    async def list_models(self) -> Result[Envelope]:
        self.model_calls += 1
        assert self.models_response is not None, "unexpected list_models"
        return self.models_response


@pytest.fixture
def poll_settings() -> PollSettings:
    return PollSettings(interval=0.0, deadline_multiplier=1.5, max_poll_seconds=300.0)


@pytest.fixture
def config(poll_settings: PollSettings) -> WujieConfig:
    return WujieConfig(
        base_url="https://wujie.test",
        api_key="test-key",
        polling=poll_settings,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()

