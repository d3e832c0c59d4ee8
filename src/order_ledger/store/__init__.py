"""Record components: existence-gated store, range scanner, history."""

from order_ledger.store.history import HistoryReconstructor
from order_ledger.store.records import RecordOperations, RecordStore
from order_ledger.store.scanner import RangeScanner

__all__ = [
    "HistoryReconstructor",
    "RangeScanner",
    "RecordOperations",
    "RecordStore",
]
