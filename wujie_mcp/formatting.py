"""Human-readable tool output. Pure functions; snapshots are never modified."""

from datetime import timedelta

import humanize

from wujie_mcp.interfaces import ModelInfo
from wujie_mcp.status import TaskSnapshot, TaskState


def format_cost(cost: float | None) -> str:
    """Credits as shown to the user: '5', '2.5', or 'n/a'."""
    if cost is None:
        return "n/a"
    return f"{cost:g}"


def format_wait(seconds: float | None) -> str:
    """Expected wait, e.g. '30 seconds' or 'a minute'."""
    if not seconds or seconds <= 0:
        return "unknown"
    return humanize.naturaldelta(timedelta(seconds=seconds))


def _image_link(snapshot: TaskSnapshot) -> str:
    if snapshot.artifact_url:
        return f"[view image]({snapshot.artifact_url})"
    return "no image URL returned"


def format_success(snapshot: TaskSnapshot) -> str:
    lines = [
        f"✅ Image generated (task {snapshot.key})",
        f"Image: {_image_link(snapshot)}",
    ]
    if snapshot.mini_artifact_url:
        lines.append(f"Preview: [compressed copy]({snapshot.mini_artifact_url})")
    lines.append(f"Credits used: {format_cost(snapshot.cost)}")
    return "\n".join(lines)


def format_failure(snapshot: TaskSnapshot) -> str:
    cause = snapshot.failure or "unknown error"
    if snapshot.state is TaskState.CANCELLED:
        return f"Task {snapshot.key} was cancelled: {cause}"
    return f"Task {snapshot.key} failed: {cause}"


def _status_line(snapshot: TaskSnapshot) -> str:
    match snapshot.state:
        case TaskState.QUEUED:
            return "Queued, waiting for a worker..."
        case TaskState.GENERATING:
            return "Generating..."
        case TaskState.SUCCEEDED:
            return f"✅ Done! {_image_link(snapshot)}"
        case TaskState.FAILED:
            return f"❌ Failed: {snapshot.failure or 'unknown error'}"
        case TaskState.CANCELLED:
            return f"Cancelled: {snapshot.failure or 'unknown error'}"
        case TaskState.UNKNOWN:
            return f"Unknown status (code {snapshot.status_code})"


def format_status(snapshot: TaskSnapshot) -> str:
    """One-shot status report: state line plus credits so far."""
    return (
        f"Task {snapshot.key}\n"
        f"Status: {_status_line(snapshot)}\n"
        f"Credits used: {format_cost(snapshot.cost)}"
    )


def format_submitted(key: str, expected_seconds: float, expected_cost: float | None) -> str:
    return (
        f"Task created: {key}\n"
        f"Expected wait: {format_wait(expected_seconds)}\n"
        f"Expected credits: {format_cost(expected_cost)}\n"
        "Use query_generate_task with this key to check progress."
    )


def format_model_table(models: list[ModelInfo]) -> str:
    """Markdown table of (model_code, model_desc)."""
    rows = ["| model_code | model_desc |", "| --- | --- |"]
    for m in models:
        desc = m.model_desc.replace("|", "\\|")
        rows.append(f"| {m.model_code} | {desc} |")
    return "\n".join(rows)
