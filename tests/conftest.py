from __future__ import annotations

import os

import pytest

from order_ledger.domain.orders import Order
from order_ledger.ledger.sqlite import SqliteLedger
from order_ledger.store.history import HistoryReconstructor
from order_ledger.store.records import RecordStore
from order_ledger.store.scanner import RangeScanner


def pytest_sessionstart(session: pytest.Session) -> None:
    # Never seed sample data into a developer's ledger during test runs.
    os.environ.setdefault("LEDGER_SEED_SAMPLE_DATA", "false")


def make_order(key: str, **overrides: str) -> Order:
    fields = {
        "order_no": key,
        "date": "2024-03-01",
        "order_detail": f"details for {key}",
        "invoice": "INV-001",
        "packing_status": "Packing",
        "payment_method": "Credit Card",
        "order_track": "In Progress",
    }
    fields.update(overrides)
    return Order(**fields)


@pytest.fixture
def ledger_path(tmp_path):
    return str(tmp_path / "ledger.sqlite")


@pytest.fixture
def ledger(ledger_path):
    sqlite_ledger = SqliteLedger(ledger_path, scan_batch_size=2)
    yield sqlite_ledger
    sqlite_ledger.close()


@pytest.fixture
def store(ledger):
    return RecordStore(ledger)


@pytest.fixture
def scanner(ledger):
    return RangeScanner(ledger)


@pytest.fixture
def history(ledger):
    return HistoryReconstructor(ledger)


@pytest.fixture
def order_factory():
    return make_order
