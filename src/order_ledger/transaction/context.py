"""Request-scoped transaction context.

The context supplies a transaction id and caller identity for audit
logging. Nothing in the record layer makes authorization decisions on it.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from order_ledger.utils.time import utc_now


class TransactionType(str, Enum):
    """Whether a transaction is submitted for commit or only evaluated."""

    SUBMIT = "submit"
    EVALUATE = "evaluate"

    @classmethod
    def parse(cls, value: str) -> "TransactionType":
        normalized = value.strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        allowed = ", ".join(member.value for member in cls)
        raise ValueError(f"Unknown transaction type {value!r}; expected one of: {allowed}")


def new_tx_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class TransactionContext:
    """Immutable transaction-scoped context."""

    caller_id: str
    tx_type: TransactionType = TransactionType.EVALUATE
    tx_id: str = field(default_factory=new_tx_id)
    received_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        # Accept the raw tag but never an unrecognized one.
        if not isinstance(self.tx_type, TransactionType):
            object.__setattr__(self, "tx_type", TransactionType.parse(str(self.tx_type)))


_transaction_context: ContextVar[TransactionContext | None] = ContextVar(
    "transaction_context",
    default=None,
)


def set_transaction_context(ctx: TransactionContext) -> Token[TransactionContext | None]:
    """Set context and return reset token."""
    return _transaction_context.set(ctx)


def reset_transaction_context(token: Token[TransactionContext | None]) -> None:
    """Reset context using token from set_transaction_context()."""
    _transaction_context.reset(token)


def get_transaction_context() -> TransactionContext:
    """Get context or raise RuntimeError."""
    ctx = _transaction_context.get()
    if ctx is None:
        raise RuntimeError("No transaction context set")
    return ctx


def get_transaction_context_optional() -> TransactionContext | None:
    """Get context or None (for code that also runs outside a transaction)."""
    return _transaction_context.get()


@contextmanager
def transaction_scope(
    caller_id: str,
    tx_type: TransactionType = TransactionType.EVALUATE,
) -> Iterator[TransactionContext]:
    """Run a block inside a fresh transaction context."""
    ctx = TransactionContext(caller_id=caller_id, tx_type=tx_type)
    token = set_transaction_context(ctx)
    try:
        yield ctx
    finally:
        reset_transaction_context(token)
