"""Startup config validation.

Determines whether the server is sufficiently configured to start serving tools.
"""

import os
from pathlib import Path

import yaml
from dotenv import dotenv_values

from wujie_mcp import secrets
from wujie_mcp.settings import get_default_settings, get_setting


def _read_settings(settings_file: Path) -> tuple[dict, str | None]:
    """Load and parse settings YAML. Returns (settings, None) or ({}, error_message)."""
    try:
        data = yaml.safe_load(settings_file.read_text(encoding="utf-8")) or {}
        return (data, None)
    except yaml.YAMLError as e:
        return ({}, f"settings.yaml parse error: {e}")


def is_configured(
    settings_path: Path | None = None,
    env_path: Path | None = None,
    project_root: Path | None = None,
) -> tuple[bool, str]:
    """Check whether config is sufficient to start the server. Returns (ok, reason).

    A missing settings.yaml is fine (defaults apply); the API key is not.
    """
    root = project_root or Path.cwd()
    settings_file = settings_path or (root / "config" / "settings.yaml")
    env_file = env_path or (root / ".env")

    settings: dict = {}
    if settings_file.exists():
        settings, err = _read_settings(settings_file)
        if err is not None:
            return False, err
        if not isinstance(settings, dict):
            return False, "settings.yaml must contain a mapping"

    defaults = get_default_settings()
    base_url = get_setting(settings, "wujie.base_url", get_setting(defaults, "wujie.base_url"))
    if not base_url:
        return False, "wujie.base_url not set"

    secret_name = get_setting(
        settings, "wujie.api_key_secret", get_setting(defaults, "wujie.api_key_secret")
    )
    env_vars = dict(dotenv_values(env_file)) if env_file.exists() else {}
    env_vars.update(get_current_env())
    if not (secrets.get_secret(secret_name) or env_vars.get(secret_name)):
        return False, f"{secret_name} is not set (keyring, environment or .env)"
    return True, "ok"


def get_current_env() -> dict[str, str]:
    """Return current process environment as dict (for keys already in env)."""
    return {k: v for k, v in os.environ.items() if isinstance(v, str)}
