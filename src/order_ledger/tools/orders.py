"""Order tools: one MCP tool per record operation."""

from __future__ import annotations

from collections.abc import Callable

from order_ledger.app import get_app_context
from order_ledger.domain.orders import Order
from order_ledger.errors import RecordStoreError
from order_ledger.mcp_runtime import ToolResult, ToolSpec
from order_ledger.seed import init_ledger
from order_ledger.tools._schemas import EMPTY_SCHEMA, KEY_SCHEMA, ORDER_SCHEMA
from order_ledger.tools.base import error_response, result_from_payload, validate_or_raise
from order_ledger.transaction.context import TransactionType, transaction_scope


def _run(
    tx_type: TransactionType,
    action: Callable[[], dict[str, object]],
) -> ToolResult:
    ctx = get_app_context()
    with transaction_scope(ctx.settings.server.caller_id, tx_type) as tx:
        try:
            payload = action()
        except RecordStoreError as exc:
            return error_response(exc)
    payload["txId"] = tx.tx_id
    return result_from_payload(payload)


def _order_key(payload: dict[str, object]) -> str:
    return str(payload["orderNo"])


def create_order(payload: dict[str, object]) -> ToolResult:
    validate_or_raise(ORDER_SCHEMA, payload)
    order = Order.model_validate(payload)

    def action() -> dict[str, object]:
        get_app_context().store.create(order.order_no, order)
        return {"created": order.to_payload()}

    return _run(TransactionType.SUBMIT, action)


def read_order(payload: dict[str, object]) -> ToolResult:
    validate_or_raise(KEY_SCHEMA, payload)
    key = _order_key(payload)

    def action() -> dict[str, object]:
        return {"order": get_app_context().store.read(key).to_payload()}

    return _run(TransactionType.EVALUATE, action)


def update_order(payload: dict[str, object]) -> ToolResult:
    validate_or_raise(ORDER_SCHEMA, payload)
    order = Order.model_validate(payload)

    def action() -> dict[str, object]:
        get_app_context().store.update(order.order_no, order)
        return {"updated": order.to_payload()}

    return _run(TransactionType.SUBMIT, action)


def delete_order(payload: dict[str, object]) -> ToolResult:
    validate_or_raise(KEY_SCHEMA, payload)
    key = _order_key(payload)

    def action() -> dict[str, object]:
        get_app_context().store.delete(key)
        return {"deleted": key}

    return _run(TransactionType.SUBMIT, action)


def order_exists(payload: dict[str, object]) -> ToolResult:
    validate_or_raise(KEY_SCHEMA, payload)
    key = _order_key(payload)

    def action() -> dict[str, object]:
        return {"orderNo": key, "exists": get_app_context().store.exists(key)}

    return _run(TransactionType.EVALUATE, action)


def list_orders(payload: dict[str, object]) -> ToolResult:
    validate_or_raise(EMPTY_SCHEMA, payload)

    def action() -> dict[str, object]:
        results = [result.to_payload() for result in get_app_context().scanner.enumerate_all()]
        return {"count": len(results), "results": results}

    return _run(TransactionType.EVALUATE, action)


def order_history(payload: dict[str, object]) -> ToolResult:
    validate_or_raise(KEY_SCHEMA, payload)
    key = _order_key(payload)

    def action() -> dict[str, object]:
        entries = [entry.to_payload() for entry in get_app_context().history.get_history(key)]
        return {"orderNo": key, "count": len(entries), "history": entries}

    return _run(TransactionType.EVALUATE, action)


def init_sample_ledger(payload: dict[str, object]) -> ToolResult:
    validate_or_raise(EMPTY_SCHEMA, payload)

    def action() -> dict[str, object]:
        return {"written": init_ledger(get_app_context().ledger)}

    return _run(TransactionType.SUBMIT, action)


create_order_tool = ToolSpec(
    name="order_create",
    description=(
        "Create a new order. Fails with AlreadyExists if the order number is live. "
        "Required: all seven order fields (orderNo, date, orderDetail, invoice, "
        "packingStatus, paymentMethod, orderTrack)."
    ),
    input_schema=ORDER_SCHEMA,
    handler=create_order,
)

read_order_tool = ToolSpec(
    name="order_read",
    description="Read the latest version of a live order. Required: 'orderNo'.",
    input_schema=KEY_SCHEMA,
    handler=read_order,
)

update_order_tool = ToolSpec(
    name="order_update",
    description=(
        "Replace an existing order with new field values. Fails with NotFound if the "
        "order is not live. The order number itself cannot change."
    ),
    input_schema=ORDER_SCHEMA,
    handler=update_order,
)

delete_order_tool = ToolSpec(
    name="order_delete",
    description=(
        "Delete a live order. Its history stays available through order_history. "
        "Required: 'orderNo'."
    ),
    input_schema=KEY_SCHEMA,
    handler=delete_order,
)

order_exists_tool = ToolSpec(
    name="order_exists",
    description="Check whether an order is live. Required: 'orderNo'.",
    input_schema=KEY_SCHEMA,
    handler=order_exists,
)

list_orders_tool = ToolSpec(
    name="order_list",
    description="List every live order in ledger key order.",
    input_schema=EMPTY_SCHEMA,
    handler=list_orders,
)

order_history_tool = ToolSpec(
    name="order_history",
    description=(
        "Return every version of an order, newest first, including deletions. "
        "A deletion entry carries an empty order; the deleted value is the next entry."
    ),
    input_schema=KEY_SCHEMA,
    handler=order_history,
)

init_ledger_tool = ToolSpec(
    name="order_init_ledger",
    description="Write the two sample orders (logis_ordr_1, logis_ordr_2) to the ledger.",
    input_schema=EMPTY_SCHEMA,
    handler=init_sample_ledger,
)
