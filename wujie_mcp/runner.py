"""Entry point for the MCP server process: config check, wiring, stdio loop."""

import asyncio
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from wujie_mcp.config import MissingCredentialError, WujieConfig, load_config
from wujie_mcp.config_check import is_configured
from wujie_mcp.gateway import WujieGateway, create_client
from wujie_mcp.logging_config import setup_logging
from wujie_mcp.server import build_server, serve_stdio
from wujie_mcp.settings import load_settings
from wujie_mcp.tools import ImageTools

logger = logging.getLogger(__name__)

_PROJECT_ROOT = Path(__file__).resolve().parent.parent


async def main_async(config: WujieConfig) -> None:
    """Build the shared client and tools, serve, close the client on exit."""
    async with create_client(config) as client:
        gateway = WujieGateway(config, client)
        tools = ImageTools(config, gateway)
        server = build_server(config, tools)
        await serve_stdio(server)


def main() -> None:
    """Synchronous entry for the MCP server process."""
    load_dotenv(_PROJECT_ROOT / ".env")
    settings = load_settings()
    setup_logging(_PROJECT_ROOT, settings)

    ok, reason = is_configured(project_root=_PROJECT_ROOT)
    if not ok:
        logger.error("Not configured: %s", reason)
        print(f"wujie-mcp: {reason}", file=sys.stderr)
        sys.exit(1)
    try:
        config = load_config(settings)
    except MissingCredentialError as e:
        logger.error("Not configured: %s", e)
        print(f"wujie-mcp: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        asyncio.run(main_async(config))
    except KeyboardInterrupt:
        pass
    logger.info("Wujie AI MCP server stopped")


__all__ = ["main"]
