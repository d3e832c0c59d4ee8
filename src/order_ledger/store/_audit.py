"""Audit logging and error-context helpers shared by the record components."""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Concatenate, ParamSpec, Protocol, TypeVar

from order_ledger.domain.operations import Operation
from order_ledger.errors import (
    InvalidKeyError,
    RecordAlreadyExistsError,
    RecordNotFoundError,
    RecordStoreError,
    StorageError,
)
from order_ledger.transaction.context import get_transaction_context_optional

P = ParamSpec("P")
R = TypeVar("R")

# Conditions a caller is expected to handle; everything else is a fault.
_EXPECTED_ERRORS = (RecordNotFoundError, RecordAlreadyExistsError, InvalidKeyError)


class _HasLogger(Protocol):
    _logger: logging.Logger


def log_start(logger: logging.Logger, operation: Operation, key: str | None) -> None:
    ctx = get_transaction_context_optional()
    tx_id = ctx.tx_id if ctx else "-"
    caller_id = ctx.caller_id if ctx else "-"
    tx_type = ctx.tx_type.value if ctx else "-"
    logger.info(
        "%s order=%s tx_id=%s tx_type=%s caller_id=%s",
        operation.value,
        key if key is not None else "*",
        tx_id,
        tx_type,
        caller_id,
    )


def log_failure(logger: logging.Logger, exc: RecordStoreError) -> None:
    if isinstance(exc, _EXPECTED_ERRORS):
        logger.info("%s rejected: %s", exc.operation.value if exc.operation else "-", exc)
    else:
        logger.error("%s failed: %s", exc.operation.value if exc.operation else "-", exc)


def validate_key(key: str, operation: Operation) -> None:
    if not isinstance(key, str) or not key:
        raise InvalidKeyError("order key must be a non-empty string", key=key, operation=operation)


@contextmanager
def ledger_call(key: str | None, operation: Operation) -> Iterator[None]:
    """Attach key and operation to StorageErrors raised by the ledger."""
    try:
        yield
    except StorageError as exc:
        if exc.operation is not None:
            raise
        target = f"order {key}" if key is not None else "all orders"
        raise StorageError(
            f"{operation.value} {target}: {exc.message}",
            key=key,
            operation=operation,
        ) from exc


def audited(
    operation: Operation,
) -> Callable[
    [Callable[Concatenate[_HasLogger, str, P], R]],
    Callable[Concatenate[_HasLogger, str, P], R],
]:
    """Log start, success and failure of a keyed record operation."""

    def decorator(
        func: Callable[Concatenate[_HasLogger, str, P], R],
    ) -> Callable[Concatenate[_HasLogger, str, P], R]:
        @functools.wraps(func)
        def wrapper(self: _HasLogger, key: str, *args: P.args, **kwargs: P.kwargs) -> R:
            log_start(self._logger, operation, key)
            try:
                result = func(self, key, *args, **kwargs)
            except RecordStoreError as exc:
                log_failure(self._logger, exc)
                raise
            self._logger.info("%s order=%s succeeded", operation.value, key)
            return result

        return wrapper

    return decorator
