"""Abstract ledger interface consumed by the record layer.

The ledger is append-only and versioned: every ``put`` and every
``mark_deleted`` adds an entry to the key's change log, and only the latest
live value is visible through ``get`` and ``range_scan``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import datetime
from types import TracebackType
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class LedgerEntry:
    """A live key/value pair reported by a range scan."""

    key: bytes
    value: bytes


@dataclass(frozen=True)
class LedgerModification:
    """One entry of a key's change log."""

    tx_id: str
    timestamp: datetime
    value: bytes | None
    is_delete: bool


class ScanIterator(ABC, Generic[T]):
    """Iterator over ledger rows that holds a ledger-side cursor.

    Use it as a context manager so the cursor is released on every exit
    path. ``close`` is idempotent; iterating a closed scan stops.
    """

    def __iter__(self) -> Iterator[T]:
        return self

    @abstractmethod
    def __next__(self) -> T:
        ...

    @abstractmethod
    def close(self) -> None:
        ...

    @property
    @abstractmethod
    def closed(self) -> bool:
        ...

    def __enter__(self) -> "ScanIterator[T]":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


class Ledger(ABC):
    """Ordered, versioned key-value ledger. All methods raise StorageError."""

    @abstractmethod
    def put(self, key: bytes, value: bytes) -> None:
        """Append a write and make it the latest value for key."""

    @abstractmethod
    def get(self, key: bytes) -> bytes | None:
        """Return the latest live value for key, or None."""

    @abstractmethod
    def mark_deleted(self, key: bytes) -> None:
        """Append a tombstone for key."""

    @abstractmethod
    def range_scan(self, start: bytes, end: bytes) -> ScanIterator[LedgerEntry]:
        """Scan live entries with start <= key < end in byte order.

        Empty bounds are open.
        """

    @abstractmethod
    def history_scan(self, key: bytes) -> ScanIterator[LedgerModification]:
        """Scan the change log for key, newest entry first."""

    def close(self) -> None:
        """Release the ledger's resources."""
