"""Order ledger: existence-gated order records on an append-only ledger."""

__version__ = "0.1.0"
