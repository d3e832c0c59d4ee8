from __future__ import annotations

import json

import pytest

from order_ledger.domain.operations import Operation
from order_ledger.domain.orders import HistoryEntry, Order, QueryResult, decode_order, encode_order
from order_ledger.errors import EncodingError
from order_ledger.utils.time import utc_now


def test_encode_uses_camel_case_field_names(order_factory) -> None:
    data = json.loads(encode_order(order_factory("o-1")))
    assert set(data) == {
        "orderNo",
        "date",
        "orderDetail",
        "invoice",
        "packingStatus",
        "paymentMethod",
        "orderTrack",
    }
    assert data["orderNo"] == "o-1"
    assert data["orderTrack"] == "In Progress"


@pytest.mark.parametrize(
    "order",
    [
        Order(),
        Order(order_no="o-2", date="2024-03-02", order_detail="ünïcode ✓", invoice="INV-002"),
        Order(
            order_no="o-3",
            date="",
            order_detail='quotes " and \\ backslashes',
            invoice="INV-003",
            packing_status="Packed",
            payment_method="Cash",
            order_track="Shipped",
        ),
    ],
)
def test_decode_inverts_encode(order: Order) -> None:
    assert decode_order(encode_order(order)) == order


def test_decode_missing_fields_default_to_empty() -> None:
    order = decode_order(b'{"orderNo": "o-1", "invoice": "INV-9"}')
    assert order.order_no == "o-1"
    assert order.invoice == "INV-9"
    assert order.date == ""
    assert order.order_track == ""


def test_decode_ignores_unknown_fields() -> None:
    order = decode_order(b'{"orderNo": "o-1", "extra": 1}')
    assert order.order_no == "o-1"


def test_decode_rejects_non_string_values() -> None:
    with pytest.raises(EncodingError) as excinfo:
        decode_order(b'{"orderNo": 5}', key="o-1", operation=Operation.READ)
    assert excinfo.value.key == "o-1"
    assert excinfo.value.operation is Operation.READ


@pytest.mark.parametrize("raw", [b"not json", b"[1, 2]", b"\xff\xfe", b""])
def test_decode_rejects_malformed_bytes(raw: bytes) -> None:
    with pytest.raises(EncodingError, match="failed to decode order"):
        decode_order(raw, key="o-1")


def test_empty_order_is_zero_valued() -> None:
    empty = Order.empty()
    assert set(empty.to_payload().values()) == {""}
    assert empty != Order(order_no="x")


def test_payload_helpers() -> None:
    order = Order(order_no="o-1")
    assert QueryResult(key="o-1", record=order).to_payload() == {
        "Key": "o-1",
        "Record": order.to_payload(),
    }
    now = utc_now()
    entry = HistoryEntry(tx_id="tx", timestamp=now, is_delete=True, order=Order.empty())
    payload = entry.to_payload()
    assert payload["txId"] == "tx"
    assert payload["timestamp"] == now.isoformat()
    assert payload["isDelete"] is True
