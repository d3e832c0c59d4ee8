"""Error taxonomy for the record layer.

Every error carries the key and operation it failed on so callers can log
and decide on abort or retry at the transaction level. None of them are
retried inside this package.
"""

from __future__ import annotations

from order_ledger.domain.operations import Operation


class RecordStoreError(Exception):
    """Base class for all record-layer failures."""

    error_type = "RecordStoreError"
    retryable = False

    def __init__(
        self,
        message: str,
        *,
        key: str | None = None,
        operation: Operation | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.key = key
        self.operation = operation

    def to_dict(self) -> dict[str, object]:
        return {
            "type": self.error_type,
            "message": self.message,
            "key": self.key,
            "operation": self.operation.value if self.operation else None,
            "retryable": self.retryable,
        }


class RecordNotFoundError(RecordStoreError):
    """The operation targets a key with no live record."""

    error_type = "NotFound"


class RecordAlreadyExistsError(RecordStoreError):
    """Create targets a key that already holds a live record."""

    error_type = "AlreadyExists"


class EncodingError(RecordStoreError):
    """Stored bytes could not be decoded, or a record could not be encoded."""

    error_type = "EncodingError"


class StorageError(RecordStoreError):
    """The underlying ledger call failed."""

    error_type = "StorageError"
    retryable = True


class InvalidKeyError(RecordStoreError, ValueError):
    """The key is empty or disagrees with the record's own key field."""

    error_type = "InvalidKey"
