"""Application context assembly."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from order_ledger.config import Settings, load_settings
from order_ledger.ledger.sqlite import SqliteLedger
from order_ledger.logging_utils import get_logger
from order_ledger.seed import init_ledger
from order_ledger.store.history import HistoryReconstructor
from order_ledger.store.records import RecordStore
from order_ledger.store.scanner import RangeScanner


@dataclass
class AppContext:
    """Application-wide dependency container.

    Initialized once at startup and cached for the lifetime of the process.
    """

    settings: Settings
    ledger: SqliteLedger
    store: RecordStore
    scanner: RangeScanner
    history: HistoryReconstructor


def _ledger_is_empty(scanner: RangeScanner) -> bool:
    results = scanner.enumerate_all()
    try:
        return next(results, None) is None
    finally:
        results.close()


@lru_cache(maxsize=1)
def get_app_context() -> AppContext:
    """Get or create the application context."""
    settings = load_settings()
    ledger = SqliteLedger(
        settings.ledger.sqlite_path,
        wal=settings.ledger.sqlite_wal,
        timeout_seconds=settings.ledger.timeout_seconds,
        scan_batch_size=settings.ledger.scan_batch_size,
    )
    store = RecordStore(ledger, logger=get_logger("order_ledger.store.records"))
    scanner = RangeScanner(ledger, logger=get_logger("order_ledger.store.scanner"))
    history = HistoryReconstructor(ledger, logger=get_logger("order_ledger.store.history"))

    if settings.ledger.seed_sample_data and _ledger_is_empty(scanner):
        init_ledger(ledger, logger=get_logger("order_ledger.seed"))

    return AppContext(
        settings=settings,
        ledger=ledger,
        store=store,
        scanner=scanner,
        history=history,
    )
