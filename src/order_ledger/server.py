"""Entrypoint for the order ledger MCP server."""

from __future__ import annotations

import logging
import threading

from order_ledger import __version__
from order_ledger.app import get_app_context
from order_ledger.config import load_settings
from order_ledger.logging_utils import configure_logging
from order_ledger.mcp_runtime import MCPServer
from order_ledger.tools import register_tools

SERVER_NAME = "order-ledger"


def build_server() -> MCPServer:
    """Create and configure the MCP server instance."""

    settings = load_settings()

    server = MCPServer(
        name=SERVER_NAME,
        version=__version__,
        instructions=settings.server.instructions,
    )

    # Re-configure logging after FastMCP init so our handlers persist.
    configure_logging(settings)

    logging.info("Initializing order ledger MCP server v%s", __version__)
    logging.info("Ledger database at: %s", settings.ledger.sqlite_path)
    # Open the ledger (and seed it when configured) before serving requests.
    get_app_context()
    register_tools(server)
    return server


_server: MCPServer | None = None
_server_lock = threading.Lock()


def get_server() -> MCPServer:
    """Lazily initialise and return the module-level server instance."""
    global _server
    if _server is not None:
        return _server
    with _server_lock:
        if _server is None:
            _server = build_server()
        return _server


def run_entrypoint() -> None:
    """Run the server over stdio."""
    get_server().run()


if __name__ == "__main__":  # pragma: no cover
    run_entrypoint()
