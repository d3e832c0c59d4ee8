"""Reconstruction of an order's change history from the ledger log."""

from __future__ import annotations

import logging
from collections.abc import Iterator

from order_ledger.domain.operations import Operation
from order_ledger.domain.orders import HistoryEntry, Order, decode_order
from order_ledger.errors import RecordStoreError
from order_ledger.ledger.base import Ledger
from order_ledger.store._audit import ledger_call, log_failure, log_start, validate_key


class HistoryReconstructor:
    """Replays a key's writes and tombstones into point-in-time entries.

    The ledger reports the change log newest first and that order is kept
    as is. A tombstone yields an empty order; the value it removed is the
    next entry, which is strictly older. Reversing the ledger's order would
    invert that reading, so ledgers must keep to newest-first.
    """

    def __init__(self, ledger: Ledger, logger: logging.Logger | None = None) -> None:
        self._ledger = ledger
        self._logger = logger or logging.getLogger(__name__)

    def get_history(self, key: str) -> Iterator[HistoryEntry]:
        validate_key(key, Operation.HISTORY)
        return self._replay(key)

    def _replay(self, key: str) -> Iterator[HistoryEntry]:
        log_start(self._logger, Operation.HISTORY, key)
        count = 0
        try:
            with ledger_call(key, Operation.HISTORY):
                with self._ledger.history_scan(key.encode("utf-8")) as modifications:
                    for modification in modifications:
                        if modification.is_delete:
                            order = Order.empty()
                        else:
                            order = decode_order(
                                modification.value or b"",
                                key=key,
                                operation=Operation.HISTORY,
                            )
                        count += 1
                        yield HistoryEntry(
                            tx_id=modification.tx_id,
                            timestamp=modification.timestamp,
                            is_delete=modification.is_delete,
                            order=order,
                        )
        except RecordStoreError as exc:
            log_failure(self._logger, exc)
            raise
        self._logger.info(
            "%s order=%s retrieved %d entries", Operation.HISTORY.value, key, count
        )

    def history(self, key: str) -> list[HistoryEntry]:
        return list(self.get_history(key))
