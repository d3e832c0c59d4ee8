"""Tests for tool registry helpers."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

from order_ledger.mcp_runtime import MCPServer
from order_ledger.tools import get_tool_registry, get_tool_specs, register_tools


def test_get_tool_specs_and_registry() -> None:
    specs = get_tool_specs()
    names = [tool.name for tool in specs]
    assert names == [
        "order_create",
        "order_read",
        "order_update",
        "order_delete",
        "order_exists",
        "order_list",
        "order_history",
        "order_init_ledger",
    ]

    registry = get_tool_registry()
    assert set(registry.keys()) == set(names)


def test_register_tools_adds_all_specs() -> None:
    server = MagicMock()
    with patch("order_ledger.tools.get_logger") as mock_get_logger:
        logger = MagicMock()
        mock_get_logger.return_value = logger
        register_tools(server)

    assert server.add_tool.call_count == len(get_tool_specs())
    assert logger.info.call_count >= 2


def test_register_tools_on_runtime_server_keeps_spec_order() -> None:
    server = MCPServer(name="order-ledger", version="0.0.0", instructions="test")

    with patch("order_ledger.tools.get_logger") as mock_get_logger:
        register_tools(server)

    assert server.tool_names == [tool.name for tool in get_tool_specs()]
    mock_get_logger.return_value.info.assert_called_with(
        "Registered order tools: %s", ", ".join(server.tool_names)
    )
