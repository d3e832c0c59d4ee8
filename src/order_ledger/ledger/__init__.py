"""Ledger access primitives: the abstract interface and the SQLite ledger."""

from order_ledger.ledger.base import Ledger, LedgerEntry, LedgerModification, ScanIterator
from order_ledger.ledger.sqlite import SqliteLedger

__all__ = [
    "Ledger",
    "LedgerEntry",
    "LedgerModification",
    "ScanIterator",
    "SqliteLedger",
]
