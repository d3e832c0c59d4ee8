from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from order_ledger.domain.operations import Operation
from order_ledger.domain.orders import Order
from order_ledger.errors import EncodingError, InvalidKeyError, StorageError
from order_ledger.ledger.base import Ledger
from order_ledger.ledger.sqlite import SqliteLedger
from order_ledger.store.history import HistoryReconstructor
from order_ledger.transaction.context import TransactionType, transaction_scope


def test_create_update_delete_history(store, history, order_factory) -> None:
    f1 = order_factory("k1")
    f2 = order_factory("k1", packing_status="Packed")
    store.create("k1", f1)
    store.update("k1", f2)
    store.delete("k1")

    entries = history.history("k1")

    assert len(entries) == 3
    assert entries[0].is_delete is True
    assert entries[0].order == Order.empty()
    assert entries[1].is_delete is False
    assert entries[1].order == f2
    assert entries[2].order == f1


def test_history_keeps_versions_across_recreate(store, history, order_factory) -> None:
    store.create("k1", order_factory("k1", date="2024-01-01"))
    store.delete("k1")
    store.create("k1", order_factory("k1", date="2024-02-02"))

    entries = history.history("k1")

    assert [(entry.is_delete, entry.order.date) for entry in entries] == [
        (False, "2024-02-02"),
        (True, ""),
        (False, "2024-01-01"),
    ]


def test_history_of_unknown_key_is_empty(history) -> None:
    assert history.history("never-written") == []


def test_history_entries_carry_transaction_ids(store, history, order_factory) -> None:
    with transaction_scope("alice", TransactionType.SUBMIT) as create_tx:
        store.create("k1", order_factory("k1"))
    with transaction_scope("bob", TransactionType.SUBMIT) as delete_tx:
        store.delete("k1")

    newest, oldest = history.history("k1")

    assert newest.tx_id == delete_tx.tx_id
    assert oldest.tx_id == create_tx.tx_id
    assert newest.timestamp >= oldest.timestamp
    assert newest.timestamp.tzinfo is not None


def test_open_history_ignores_later_writes(store, history, order_factory) -> None:
    store.create("a", order_factory("a"))
    store.update("a", order_factory("a", order_track="Shipped"))

    entries = history.get_history("a")
    assert next(entries).order.order_track == "Shipped"
    store.delete("a")

    rest = list(entries)

    assert [entry.order.order_track for entry in rest] == ["In Progress"]
    assert history.history("a")[0].is_delete


def test_history_ignores_other_keys(store, history, order_factory) -> None:
    store.create("k1", order_factory("k1"))
    store.create("k2", order_factory("k2"))
    assert len(history.history("k1")) == 1


def test_corrupt_version_fails_whole_call(ledger_path) -> None:
    ledger = SqliteLedger(ledger_path, scan_batch_size=1)
    scans = []
    real_history_scan = ledger.history_scan

    def tracking_history_scan(key):
        scan = real_history_scan(key)
        scans.append(scan)
        return scan

    ledger.history_scan = tracking_history_scan
    try:
        ledger.put(b"k1", b"garbage")
        ledger.put(b"k1", b'{"orderNo": "k1"}')
        reconstructor = HistoryReconstructor(ledger)

        with pytest.raises(EncodingError) as excinfo:
            reconstructor.history("k1")

        assert excinfo.value.operation is Operation.HISTORY
        assert scans[-1].closed
    finally:
        ledger.close()


def test_early_exit_releases_iterator(store, ledger, order_factory) -> None:
    scans = []
    real_history_scan = ledger.history_scan

    def tracking_history_scan(key):
        scan = real_history_scan(key)
        scans.append(scan)
        return scan

    ledger.history_scan = tracking_history_scan
    store.create("k1", order_factory("k1"))
    store.update("k1", order_factory("k1", invoice="INV-2"))
    store.update("k1", order_factory("k1", invoice="INV-3"))

    entries = HistoryReconstructor(ledger).get_history("k1")
    assert next(entries).order.invoice == "INV-3"
    entries.close()

    assert scans[-1].closed


def test_empty_key_is_rejected_eagerly(history) -> None:
    with pytest.raises(InvalidKeyError):
        history.get_history("")


def test_history_open_failure_is_storage_error() -> None:
    ledger = MagicMock(spec=Ledger)
    ledger.history_scan.side_effect = StorageError("failed to open ledger scan")

    with pytest.raises(StorageError) as excinfo:
        HistoryReconstructor(ledger).history("k1")

    assert excinfo.value.key == "k1"
    assert excinfo.value.operation is Operation.HISTORY
