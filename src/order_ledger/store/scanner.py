"""Enumeration of every live order across the full key range."""

from __future__ import annotations

import logging
from collections.abc import Iterator

from order_ledger.domain.operations import Operation
from order_ledger.domain.orders import QueryResult, decode_order
from order_ledger.errors import EncodingError, RecordStoreError
from order_ledger.ledger.base import Ledger
from order_ledger.store._audit import ledger_call, log_failure, log_start

# Empty bounds leave the scan open at both ends.
_OPEN_START = b""
_OPEN_END = b""


class RangeScanner:
    def __init__(self, ledger: Ledger, logger: logging.Logger | None = None) -> None:
        self._ledger = ledger
        self._logger = logger or logging.getLogger(__name__)

    def enumerate_all(self) -> Iterator[QueryResult]:
        """Yield every live order in the ledger's byte-wise key order.

        The ledger cursor is opened on first iteration and released when
        the generator finishes, is closed early, or raises. A record that
        fails to decode aborts the enumeration instead of being skipped.
        """
        log_start(self._logger, Operation.LIST, None)
        count = 0
        try:
            with ledger_call(None, Operation.LIST):
                with self._ledger.range_scan(_OPEN_START, _OPEN_END) as results:
                    for entry in results:
                        key = _decode_key(entry.key)
                        record = decode_order(entry.value, key=key, operation=Operation.LIST)
                        count += 1
                        yield QueryResult(key=key, record=record)
        except RecordStoreError as exc:
            log_failure(self._logger, exc)
            raise
        self._logger.info("%s queried %d orders", Operation.LIST.value, count)

    def list_all(self) -> list[QueryResult]:
        return list(self.enumerate_all())


def _decode_key(raw: bytes) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise EncodingError(
            f"ledger key {raw!r} is not valid UTF-8", operation=Operation.LIST
        ) from exc
