"""SQLite-backed append-only ledger."""

from __future__ import annotations

import sqlite3
import threading
from collections import deque
from collections.abc import Callable, Sequence
from datetime import datetime
from pathlib import Path
from typing import TypeVar

from order_ledger.errors import StorageError
from order_ledger.ledger.base import Ledger, LedgerEntry, LedgerModification, ScanIterator
from order_ledger.transaction.context import get_transaction_context_optional, new_tx_id
from order_ledger.utils.time import parse_iso, utc_now

T = TypeVar("T")

_SqlValue = str | bytes | int | float | None


class _SqliteScan(ScanIterator[T]):
    def __init__(
        self,
        conn: sqlite3.Connection,
        lock: threading.Lock,
        query: str,
        params: Sequence[_SqlValue],
        row_mapper: Callable[[sqlite3.Row], T],
        batch_size: int,
    ) -> None:
        self._lock = lock
        self._row_mapper = row_mapper
        self._batch_size = batch_size
        self._buffer: deque[sqlite3.Row] = deque()
        self._exhausted = False
        self._closed = False
        with self._lock:
            try:
                self._cursor = conn.execute(query, params)
            except sqlite3.Error as exc:
                raise StorageError(f"failed to open ledger scan: {exc}") from exc

    @property
    def closed(self) -> bool:
        return self._closed

    def __next__(self) -> T:
        if self._closed:
            raise StopIteration
        if not self._buffer and not self._exhausted:
            self._fill()
        if not self._buffer:
            self.close()
            raise StopIteration
        return self._row_mapper(self._buffer.popleft())

    def _fill(self) -> None:
        with self._lock:
            try:
                rows = self._cursor.fetchmany(self._batch_size)
            except sqlite3.Error as exc:
                raise StorageError(f"failed to advance ledger scan: {exc}") from exc
        if len(rows) < self._batch_size:
            self._exhausted = True
        self._buffer.extend(rows)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._buffer.clear()
        with self._lock:
            try:
                self._cursor.close()
            except sqlite3.ProgrammingError:
                # The connection was closed first; the cursor went with it.
                pass


def _entry_from_row(row: sqlite3.Row) -> LedgerEntry:
    return LedgerEntry(key=bytes(row["key"]), value=bytes(row["value"]))


def _modification_from_row(row: sqlite3.Row) -> LedgerModification:
    value = row["value"]
    return LedgerModification(
        tx_id=row["tx_id"],
        timestamp=parse_iso(row["timestamp"]),
        value=bytes(value) if value is not None else None,
        is_delete=bool(row["is_delete"]),
    )


class SqliteLedger(Ledger):
    """Ledger kept in two tables.

    ``ledger_log`` is the append-only change log, one row per write or
    tombstone. ``world_state`` holds the latest live value per key for point
    reads and loses its row when the key is deleted. Scans rebuild state from
    the log instead. Keys are BLOBs, so SQLite orders them byte-lexicographically.
    """

    def __init__(
        self,
        path: str,
        wal: bool = True,
        timeout_seconds: float = 5.0,
        scan_batch_size: int = 100,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(path, timeout=timeout_seconds, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._lock = threading.Lock()
        self._closed = False
        self._scan_batch_size = scan_batch_size
        self._clock = clock
        if wal:
            self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.execute("PRAGMA foreign_keys=ON")
        self._init_schema()

    def _init_schema(self) -> None:
        self._conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS ledger_log (
                seq INTEGER PRIMARY KEY AUTOINCREMENT,
                key BLOB NOT NULL,
                value BLOB,
                is_delete INTEGER NOT NULL DEFAULT 0,
                tx_id TEXT NOT NULL,
                timestamp TEXT NOT NULL
            );

            CREATE TABLE IF NOT EXISTS world_state (
                key BLOB PRIMARY KEY,
                value BLOB NOT NULL,
                seq INTEGER NOT NULL,
                FOREIGN KEY(seq) REFERENCES ledger_log(seq)
            );

            CREATE INDEX IF NOT EXISTS idx_ledger_log_key_seq ON ledger_log(key, seq);
            """
        )
        self._conn.commit()

    def _current_tx_id(self) -> str:
        ctx = get_transaction_context_optional()
        return ctx.tx_id if ctx is not None else new_tx_id()

    def _append(self, key: bytes, value: bytes | None) -> None:
        tx_id = self._current_tx_id()
        timestamp = self._clock().isoformat()
        is_delete = value is None
        with self._lock:
            try:
                with self._conn:
                    cursor = self._conn.execute(
                        """
                        INSERT INTO ledger_log (key, value, is_delete, tx_id, timestamp)
                        VALUES (?, ?, ?, ?, ?)
                        """,
                        (key, value, int(is_delete), tx_id, timestamp),
                    )
                    if is_delete:
                        self._conn.execute("DELETE FROM world_state WHERE key = ?", (key,))
                    else:
                        self._conn.execute(
                            """
                            INSERT INTO world_state (key, value, seq) VALUES (?, ?, ?)
                            ON CONFLICT(key) DO UPDATE
                            SET value = excluded.value, seq = excluded.seq
                            """,
                            (key, value, cursor.lastrowid),
                        )
            except sqlite3.Error as exc:
                action = "delete" if is_delete else "put"
                raise StorageError(f"failed to {action} {key!r} in ledger: {exc}") from exc

    def put(self, key: bytes, value: bytes) -> None:
        self._append(key, value)

    def mark_deleted(self, key: bytes) -> None:
        self._append(key, None)

    def get(self, key: bytes) -> bytes | None:
        with self._lock:
            try:
                row = self._conn.execute(
                    "SELECT value FROM world_state WHERE key = ?", (key,)
                ).fetchone()
            except sqlite3.Error as exc:
                raise StorageError(f"failed to read {key!r} from ledger: {exc}") from exc
        if row is None:
            return None
        return bytes(row["value"])

    def _snapshot_seq(self) -> int:
        with self._lock:
            try:
                row = self._conn.execute(
                    "SELECT COALESCE(MAX(seq), 0) AS seq FROM ledger_log"
                ).fetchone()
            except sqlite3.Error as exc:
                raise StorageError(f"failed to open ledger scan: {exc}") from exc
        return int(row["seq"])

    def range_scan(self, start: bytes, end: bytes) -> ScanIterator[LedgerEntry]:
        """Scan the live keys as of the moment of the call.

        The state is rebuilt from log rows up to the current high-water
        ``seq``, so writes made while the iterator is open are not seen.
        """
        clauses = ["seq <= ?"]
        params: list[_SqlValue] = [self._snapshot_seq()]
        if start:
            clauses.append("key >= ?")
            params.append(start)
        if end:
            clauses.append("key < ?")
            params.append(end)
        return _SqliteScan(
            self._conn,
            self._lock,
            f"""
            SELECT log.key, log.value FROM ledger_log AS log
            JOIN (
                SELECT key, MAX(seq) AS seq FROM ledger_log
                WHERE {' AND '.join(clauses)}
                GROUP BY key
            ) AS latest ON log.seq = latest.seq
            WHERE log.is_delete = 0
            ORDER BY log.key ASC
            """,
            params,
            _entry_from_row,
            self._scan_batch_size,
        )

    def history_scan(self, key: bytes) -> ScanIterator[LedgerModification]:
        return _SqliteScan(
            self._conn,
            self._lock,
            """
            SELECT tx_id, timestamp, value, is_delete FROM ledger_log
            WHERE key = ? AND seq <= ? ORDER BY seq DESC
            """,
            (key, self._snapshot_seq()),
            _modification_from_row,
            self._scan_batch_size,
        )

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._conn.close()
            self._closed = True
