"""JSON Schema definitions for the order tools."""

from __future__ import annotations

_KEY_PROPERTY = {
    "type": "string",
    "minLength": 1,
    "maxLength": 256,
    "description": "Order number. Doubles as the ledger key.",
}

_ORDER_PROPERTIES: dict[str, object] = {
    "orderNo": _KEY_PROPERTY,
    "date": {"type": "string", "description": "Order date, e.g. '2024-03-01'."},
    "orderDetail": {"type": "string", "description": "Free-text order details."},
    "invoice": {"type": "string", "description": "Invoice reference, e.g. 'INV-001'."},
    "packingStatus": {"type": "string", "description": "Packing status."},
    "paymentMethod": {"type": "string", "description": "Payment method."},
    "orderTrack": {"type": "string", "description": "Tracking status of the order."},
}

ORDER_SCHEMA = {
    "type": "object",
    "properties": _ORDER_PROPERTIES,
    "required": list(_ORDER_PROPERTIES.keys()),
    "additionalProperties": False,
}

KEY_SCHEMA = {
    "type": "object",
    "properties": {"orderNo": _KEY_PROPERTY},
    "required": ["orderNo"],
    "additionalProperties": False,
}

EMPTY_SCHEMA = {
    "type": "object",
    "properties": {},
    "additionalProperties": False,
}
