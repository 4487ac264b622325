"""Wire models for the Wujie open API and the gateway protocol."""

from typing import Any, Protocol

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from wujie_mcp.config import GenerationDefaults
from wujie_mcp.result import Result

SUCCESS_CODE = 200
ALLOWED_DIMENSIONS = (512, 768, 1024, 1360)


class _WireModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


# --- Remote envelope and payloads ---


class Envelope(_WireModel):
    """Uniform {code, message?, data} wrapper returned by every remote operation."""

    code: int
    message: str | None = None
    data: Any = None

    @property
    def ok(self) -> bool:
        return self.code == SUCCESS_CODE


class GenerateImageKeyInfo(_WireModel):
    key: str = ""
    # Remote estimate of the wait, in seconds.
    expected_second: float = 0
    # Shared by all images of one request (MJ models).
    batch_task_key: str | None = Field(
        default=None, validation_alias=AliasChoices("batchTask_key", "batch_task_key")
    )


class GenerateImageResult(_WireModel):
    results: list[GenerateImageKeyInfo] = Field(default_factory=list)
    expected_integral_cost: float | None = None


class FailMessage(_WireModel):
    fail_code: int | None = None
    fail_message: str | None = None


class GenerateTaskInfo(_WireModel):
    """Task record returned by the query endpoint."""

    status: int
    picture_url: str | None = None
    # Compressed copy, only present for images over 20 MB.
    mini_picture_url: str | None = None
    generate_time: int | None = None
    start_gen_time: int | None = None
    complete_time: int | None = None
    involve_yellow: int | bool | None = None
    fail_message: FailMessage | None = Field(
        default=None, validation_alias=AliasChoices("fail_message", "failMessage")
    )
    seed: str | None = None
    sampler_index: int | None = None
    cfg: float | None = None
    steps: int | None = None
    integral_cost: float | None = None
    integral_cost_message: str | None = None

    @field_validator("seed", mode="before")
    @classmethod
    def _seed_as_text(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int) else v


class ModelInfo(_WireModel):
    model_code: int
    model_desc: str = ""


# --- Caller parameters ---


class GenerateParams(BaseModel):
    """Arguments of the generate_image tool. Unset optionals are not sent."""

    model_config = ConfigDict(extra="ignore")

    prompt: str = Field(min_length=1)
    model: int | None = None
    num: int | None = Field(default=None, ge=1)
    width: int | None = None
    height: int | None = None
    uc_prompt: str | None = None
    init_image_url: str | None = None
    steps: int | None = Field(default=None, ge=1)
    cfg: float | None = Field(default=None, ge=0)
    sampler_index: int | None = None
    seed: str | None = None

    @field_validator("prompt")
    @classmethod
    def _prompt_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("prompt must not be blank")
        return v

    @field_validator("width", "height")
    @classmethod
    def _dimension_allowed(cls, v: int | None) -> int | None:
        if v is not None and v not in ALLOWED_DIMENSIONS:
            raise ValueError(f"must be one of {list(ALLOWED_DIMENSIONS)}")
        return v

    @field_validator("seed", mode="before")
    @classmethod
    def _seed_as_text(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int) else v

    def to_payload(self, defaults: GenerationDefaults) -> dict[str, Any]:
        """Build the create-task body: caller values win, documented defaults fill in."""
        payload: dict[str, Any] = {
            "prompt": self.prompt,
            "model": self.model if self.model is not None else defaults.model,
            "num": self.num if self.num is not None else defaults.num,
            "width": self.width or defaults.width,
            "height": self.height or defaults.height,
            "init_image_url": (
                self.init_image_url
                if self.init_image_url is not None
                else defaults.init_image_url
            ),
        }
        for name in ("uc_prompt", "steps", "cfg", "sampler_index", "seed"):
            value = getattr(self, name)
            if value is not None:
                payload[name] = value
        return payload


# --- Gateway protocol ---


class TaskGateway(Protocol):
    """Request/response transport to the remote task service."""

    async def create_task(self, payload: dict[str, Any]) -> Result[Envelope]:
        """Submit a generation request."""
        ...

    async def query_task(self, key: str) -> Result[Envelope]:
        """Fetch the current task record for a key."""
        ...

    async def list_models(self) -> Result[Envelope]:
        """Fetch the model catalog."""
        ...
