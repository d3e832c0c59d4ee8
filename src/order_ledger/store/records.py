"""Existence-gated order records on top of the ledger.

Each mutating call issues exactly one ledger write, or none when its
existence check fails. A retried create after a successful one raises
RecordAlreadyExistsError; that is the at-most-once-create guarantee.
"""

from __future__ import annotations

import logging
from typing import Protocol

from order_ledger.domain.operations import Operation
from order_ledger.domain.orders import Order, decode_order, encode_order
from order_ledger.errors import InvalidKeyError, RecordAlreadyExistsError, RecordNotFoundError
from order_ledger.ledger.base import Ledger
from order_ledger.store._audit import audited, ledger_call, validate_key


class RecordOperations(Protocol):
    """Keyed operations exposed by a record store."""

    def exists(self, key: str) -> bool: ...

    def create(self, key: str, order: Order) -> None: ...

    def read(self, key: str) -> Order: ...

    def update(self, key: str, order: Order) -> None: ...

    def delete(self, key: str) -> None: ...


def _ledger_key(key: str) -> bytes:
    return key.encode("utf-8")


class RecordStore:
    def __init__(self, ledger: Ledger, logger: logging.Logger | None = None) -> None:
        self._ledger = ledger
        self._logger = logger or logging.getLogger(__name__)

    def _exists(self, key: str, operation: Operation) -> bool:
        validate_key(key, operation)
        with ledger_call(key, operation):
            raw = self._ledger.get(_ledger_key(key))
        return bool(raw)

    def _check_key_field(self, key: str, order: Order, operation: Operation) -> None:
        if order.order_no != key:
            raise InvalidKeyError(
                f"order key field {order.order_no!r} does not match key {key!r}",
                key=key,
                operation=operation,
            )

    @audited(Operation.EXISTS)
    def exists(self, key: str) -> bool:
        return self._exists(key, Operation.EXISTS)

    @audited(Operation.CREATE)
    def create(self, key: str, order: Order) -> None:
        if self._exists(key, Operation.CREATE):
            raise RecordAlreadyExistsError(
                f"the order {key} already exists", key=key, operation=Operation.CREATE
            )
        self._check_key_field(key, order, Operation.CREATE)
        payload = encode_order(order, key=key, operation=Operation.CREATE)
        with ledger_call(key, Operation.CREATE):
            self._ledger.put(_ledger_key(key), payload)

    @audited(Operation.READ)
    def read(self, key: str) -> Order:
        validate_key(key, Operation.READ)
        with ledger_call(key, Operation.READ):
            raw = self._ledger.get(_ledger_key(key))
        if not raw:
            raise RecordNotFoundError(
                f"the order {key} does not exist", key=key, operation=Operation.READ
            )
        return decode_order(raw, key=key, operation=Operation.READ)

    @audited(Operation.UPDATE)
    def update(self, key: str, order: Order) -> None:
        if not self._exists(key, Operation.UPDATE):
            raise RecordNotFoundError(
                f"the order {key} does not exist", key=key, operation=Operation.UPDATE
            )
        self._check_key_field(key, order, Operation.UPDATE)
        payload = encode_order(order, key=key, operation=Operation.UPDATE)
        with ledger_call(key, Operation.UPDATE):
            self._ledger.put(_ledger_key(key), payload)

    @audited(Operation.DELETE)
    def delete(self, key: str) -> None:
        if not self._exists(key, Operation.DELETE):
            raise RecordNotFoundError(
                f"the order {key} does not exist", key=key, operation=Operation.DELETE
            )
        with ledger_call(key, Operation.DELETE):
            self._ledger.mark_deleted(_ledger_key(key))
