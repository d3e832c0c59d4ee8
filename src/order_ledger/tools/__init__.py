"""Tool registration helpers.

One tool per record operation:
- order_create, order_read, order_update, order_delete, order_exists
- order_list: every live order
- order_history: every version of one order
- order_init_ledger: sample data
"""

from __future__ import annotations

from order_ledger.logging_utils import get_logger
from order_ledger.mcp_runtime import MCPServer, ToolSpec
from order_ledger.tools.orders import (
    create_order_tool,
    delete_order_tool,
    init_ledger_tool,
    list_orders_tool,
    order_exists_tool,
    order_history_tool,
    read_order_tool,
    update_order_tool,
)

__all__ = ["get_tool_registry", "get_tool_specs", "register_tools"]


def get_tool_specs() -> list[ToolSpec]:
    return [
        create_order_tool,
        read_order_tool,
        update_order_tool,
        delete_order_tool,
        order_exists_tool,
        list_orders_tool,
        order_history_tool,
        init_ledger_tool,
    ]


def get_tool_registry() -> dict[str, ToolSpec]:
    return {tool.name: tool for tool in get_tool_specs()}


def register_tools(server: MCPServer) -> None:
    """Register the order tools with the MCP server."""
    logger = get_logger(__name__)
    specs = get_tool_specs()
    logger.info("Registering %d order tools", len(specs))

    for tool in specs:
        server.add_tool(tool)

    logger.info("Registered order tools: %s", ", ".join(server.tool_names))
