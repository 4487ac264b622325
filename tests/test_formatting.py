"""Tests for wujie_mcp.formatting tool output text."""

from dataclasses import replace

from wujie_mcp.formatting import (
    format_cost,
    format_failure,
    format_model_table,
    format_status,
    format_submitted,
    format_success,
    format_wait,
)
from wujie_mcp.interfaces import ModelInfo
from wujie_mcp.status import TaskSnapshot, TaskState

DONE = TaskSnapshot(
    key="abc123",
    state=TaskState.SUCCEEDED,
    status_code=4,
    artifact_url="https://x/y.png",
    cost=5,
)


class TestFormatSuccess:
    def test_contains_key_url_and_cost(self) -> None:
        text = format_success(DONE)
        assert "abc123" in text
        assert "https://x/y.png" in text
        assert "Credits used: 5" in text

    def test_preview_link_only_when_present(self) -> None:
        assert "Preview" not in format_success(DONE)
        text = format_success(replace(DONE, mini_artifact_url="https://x/y-mini.png"))
        assert "https://x/y-mini.png" in text

    def test_missing_image_url(self) -> None:
        text = format_success(replace(DONE, artifact_url=None))
        assert "None" not in text
        assert "no image URL returned" in text
        status = format_status(replace(DONE, artifact_url=None))
        assert "None" not in status
        assert "no image URL returned" in status

    def test_does_not_mutate_snapshot(self) -> None:
        before = replace(DONE)
        format_success(DONE)
        format_status(DONE)
        assert DONE == before


class TestFormatStatus:
    def test_each_state_has_a_line(self) -> None:
        lines = {
            state: format_status(
                TaskSnapshot(key="k", state=state, status_code=0, failure="why")
            ).splitlines()[1]
            for state in TaskState
        }
        assert "Queued" in lines[TaskState.QUEUED]
        assert "Generating" in lines[TaskState.GENERATING]
        assert "Failed: why" in lines[TaskState.FAILED]
        assert "Cancelled: why" in lines[TaskState.CANCELLED]
        assert "Unknown status (code 0)" in lines[TaskState.UNKNOWN]

    def test_cost_so_far(self) -> None:
        text = format_status(TaskSnapshot(key="k", state=TaskState.GENERATING, status_code=2, cost=2.5))
        assert "Credits used: 2.5" in text

    def test_cost_missing(self) -> None:
        text = format_status(TaskSnapshot(key="k", state=TaskState.QUEUED, status_code=1))
        assert "Credits used: n/a" in text


def test_format_failure_mentions_cause() -> None:
    failed = TaskSnapshot(key="k", state=TaskState.FAILED, status_code=3, failure="bad prompt")
    cancelled = replace(failed, state=TaskState.CANCELLED, status_code=-1)
    assert format_failure(failed) == "Task k failed: bad prompt"
    assert format_failure(cancelled) == "Task k was cancelled: bad prompt"


def test_format_cost() -> None:
    assert format_cost(5) == "5"
    assert format_cost(5.0) == "5"
    assert format_cost(0.5) == "0.5"
    assert format_cost(None) == "n/a"


def test_format_wait() -> None:
    assert format_wait(30) == "30 seconds"
    assert "minute" in format_wait(90)
    assert format_wait(0) == "unknown"


def test_format_submitted() -> None:
    text = format_submitted("abc123", 30, 4)
    assert "abc123" in text
    assert "30 seconds" in text
    assert "Expected credits: 4" in text


def test_model_table() -> None:
    text = format_model_table([ModelInfo(model_code=1013, model_desc="FLUX")])
    header, sep, row = text.splitlines()
    assert header == "| model_code | model_desc |"
    assert sep == "| --- | --- |"
    assert row == "| 1013 | FLUX |"


def test_model_table_escapes_pipes() -> None:
    text = format_model_table([ModelInfo(model_code=1, model_desc="a|b")])
    assert text.splitlines()[2] == "| 1 | a\\|b |"
