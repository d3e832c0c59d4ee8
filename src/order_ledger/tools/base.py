"""Tool helpers."""

from __future__ import annotations

import json

from order_ledger.errors import RecordStoreError
from order_ledger.mcp_runtime import ToolResult
from order_ledger.utils.jsonschema import validate_payload
from order_ledger.utils.serialization import json_default


def validate_or_raise(schema: dict[str, object], payload: dict[str, object]) -> None:
    errors = validate_payload(schema, payload)
    if errors:
        raise ValueError("Input validation failed: " + "; ".join(errors))


def result_from_payload(payload: dict[str, object]) -> ToolResult:
    text = json.dumps(payload, ensure_ascii=True, indent=2, default=json_default)
    content = [{"type": "text", "text": text}]
    return ToolResult(content=content, structured_content=payload)


def error_response(exc: RecordStoreError) -> ToolResult:
    """Create a standardized error response."""
    return result_from_payload({"error": exc.to_dict()})
