"""Transaction context shared by the ledger and the record layer."""

from order_ledger.transaction.context import (
    TransactionContext,
    TransactionType,
    get_transaction_context,
    get_transaction_context_optional,
    new_tx_id,
    reset_transaction_context,
    set_transaction_context,
    transaction_scope,
)

__all__ = [
    "TransactionContext",
    "TransactionType",
    "get_transaction_context",
    "get_transaction_context_optional",
    "new_tx_id",
    "reset_transaction_context",
    "set_transaction_context",
    "transaction_scope",
]
