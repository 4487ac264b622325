"""Immutable runtime configuration built once from settings and the API key."""

from dataclasses import dataclass, field
from typing import Any

from wujie_mcp import secrets
from wujie_mcp.settings import get_setting


class MissingCredentialError(RuntimeError):
    """The Wujie API key could not be resolved at startup."""


@dataclass(frozen=True)
class GenerationDefaults:
    """Values used for generate_image arguments the caller leaves out."""

    model: int = 1018
    num: int = 1
    width: int = 512
    height: int = 512
    init_image_url: str = ""


@dataclass(frozen=True)
class PollSettings:
    interval: float = 3.0
    deadline_multiplier: float = 1.5
    max_poll_seconds: float = 300.0


@dataclass(frozen=True)
class Endpoints:
    create_task: str = "/wj-open/v2/ai/create"
    query_task: str = "/wj-open/v2/ai/info"
    model_infos: str = "/wj-open/v2/ai/model_base_infos"


@dataclass(frozen=True)
class WujieConfig:
    base_url: str
    api_key: str = field(repr=False)
    endpoints: Endpoints = field(default_factory=Endpoints)
    request_timeout: float = 30.0
    defaults: GenerationDefaults = field(default_factory=GenerationDefaults)
    polling: PollSettings = field(default_factory=PollSettings)
    server_name: str = "wujie-ai-server"
    server_version: str = "1.0.0"

    @classmethod
    def from_settings(cls, settings: dict[str, Any], api_key: str) -> "WujieConfig":
        endpoints = get_setting(settings, "wujie.endpoints", {}) or {}
        defaults = get_setting(settings, "wujie.defaults", {}) or {}
        polling = settings.get("polling") or {}
        return cls(
            base_url=str(get_setting(settings, "wujie.base_url", "")).rstrip("/"),
            api_key=api_key,
            endpoints=Endpoints(**{k: str(v) for k, v in endpoints.items()}),
            request_timeout=float(get_setting(settings, "wujie.request_timeout", 30.0)),
            defaults=GenerationDefaults(
                model=int(defaults.get("model", 1018)),
                num=int(defaults.get("num", 1)),
                width=int(defaults.get("width", 512)),
                height=int(defaults.get("height", 512)),
                init_image_url=str(defaults.get("init_image_url", "")),
            ),
            polling=PollSettings(
                interval=float(polling.get("interval", 3.0)),
                deadline_multiplier=float(polling.get("deadline_multiplier", 1.5)),
                max_poll_seconds=float(polling.get("max_poll_seconds", 300.0)),
            ),
            server_name=str(get_setting(settings, "server.name", "wujie-ai-server")),
            server_version=str(get_setting(settings, "server.version", "1.0.0")),
        )


def load_config(settings: dict[str, Any]) -> WujieConfig:
    """Resolve the API key and build the config. Raises MissingCredentialError."""
    secret_name = get_setting(settings, "wujie.api_key_secret", "WUJIE_API_KEY")
    api_key = secrets.get_secret(secret_name)
    if not api_key:
        raise MissingCredentialError(f"{secret_name} is not set")
    return WujieConfig.from_settings(settings, api_key.strip())
