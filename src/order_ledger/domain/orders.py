"""Order records and their ledger encoding."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_core import PydanticSerializationError

from order_ledger.domain.operations import Operation
from order_ledger.errors import EncodingError


class Order(BaseModel):
    """A logistics order. ``order_no`` doubles as the ledger key.

    Fields missing from stored JSON decode to the empty string, so a
    zero-valued ``Order()`` is the snapshot carried by tombstones.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        strict=True,
        extra="ignore",
    )

    order_no: str = Field(default="", alias="orderNo")
    date: str = Field(default="")
    order_detail: str = Field(default="", alias="orderDetail")
    invoice: str = Field(default="")
    packing_status: str = Field(default="", alias="packingStatus")
    payment_method: str = Field(default="", alias="paymentMethod")
    order_track: str = Field(default="", alias="orderTrack")

    @classmethod
    def empty(cls) -> "Order":
        return cls()

    def to_payload(self) -> dict[str, str]:
        return self.model_dump(by_alias=True)


@dataclass(frozen=True)
class QueryResult:
    key: str
    record: Order

    def to_payload(self) -> dict[str, object]:
        return {"Key": self.key, "Record": self.record.to_payload()}


@dataclass(frozen=True)
class HistoryEntry:
    """One point-in-time version of an order.

    A tombstone (``is_delete``) carries an empty order; the value that was
    deleted is the next, strictly older, entry.
    """

    tx_id: str
    timestamp: datetime
    is_delete: bool
    order: Order

    def to_payload(self) -> dict[str, object]:
        return {
            "txId": self.tx_id,
            "timestamp": self.timestamp.isoformat(),
            "isDelete": self.is_delete,
            "order": self.order.to_payload(),
        }


def encode_order(
    order: Order,
    *,
    key: str | None = None,
    operation: Operation | None = None,
) -> bytes:
    try:
        return order.model_dump_json(by_alias=True).encode("utf-8")
    except PydanticSerializationError as exc:
        raise EncodingError(
            f"failed to encode order {key or order.order_no}: {exc}",
            key=key,
            operation=operation,
        ) from exc


def decode_order(
    raw: bytes,
    *,
    key: str | None = None,
    operation: Operation | None = None,
) -> Order:
    try:
        return Order.model_validate_json(raw)
    except ValidationError as exc:
        raise EncodingError(
            f"failed to decode order {key}: {exc.error_count()} validation error(s): "
            f"{exc.errors(include_url=False)[0]['msg']}",
            key=key,
            operation=operation,
        ) from exc
