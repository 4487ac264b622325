"""Bearer token lookup: OS keyring under the ``wujie-mcp`` service, then the environment."""

import logging
import os

import keyring
from keyring.errors import KeyringError

logger = logging.getLogger(__name__)
SERVICE_NAME = "wujie-mcp"


def get_secret(name: str) -> str | None:
    """Return the secret stored as ``name``, or None when neither source has it.

    A locked or missing keyring backend is not an error; the environment is
    consulted instead.
    """
    try:
        stored = keyring.get_password(SERVICE_NAME, name)
    except KeyringError as exc:
        logger.debug("keyring unavailable for %s (%s), using environment", name, exc)
        stored = None
    return stored or os.environ.get(name) or None
