"""Result type for remote calls and pipeline steps.

Components return Ok/Err instead of raising; tools.py is the only place an Err
is turned into an McpError for the caller.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from mcp.shared.exceptions import McpError
from mcp.types import INTERNAL_ERROR, INVALID_PARAMS, METHOD_NOT_FOUND, ErrorData

__all__ = ["Err", "ErrorKind", "Ok", "Result", "REQUEST_TIMEOUT"]

# JSON-RPC implementation-defined range, same value as the MCP SDKs use.
REQUEST_TIMEOUT = -32001

T = TypeVar("T")


class ErrorKind(Enum):
    """Caller-facing error categories, valued by their JSON-RPC code."""

    INVALID_PARAMS = INVALID_PARAMS
    METHOD_NOT_FOUND = METHOD_NOT_FOUND
    INTERNAL_ERROR = INTERNAL_ERROR
    REQUEST_TIMEOUT = REQUEST_TIMEOUT


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    kind: ErrorKind
    message: str

    @property
    def ok(self) -> bool:
        return False

    def to_mcp_error(self) -> McpError:
        return McpError(ErrorData(code=self.kind.value, message=self.message))


Result = Ok[T] | Err
