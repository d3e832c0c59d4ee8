"""Operation names used in errors and audit log lines."""

from __future__ import annotations

from enum import Enum


class Operation(str, Enum):
    """Closed set of operations the record layer performs."""

    EXISTS = "exists"
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    LIST = "list"
    HISTORY = "history"
    INIT_LEDGER = "init_ledger"
