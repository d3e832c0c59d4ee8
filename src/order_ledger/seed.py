"""Sample orders written to a fresh ledger."""

from __future__ import annotations

import logging

from order_ledger.domain.operations import Operation
from order_ledger.domain.orders import Order, encode_order
from order_ledger.ledger.base import Ledger
from order_ledger.store._audit import ledger_call, log_start

SAMPLE_ORDERS: tuple[Order, ...] = (
    Order(
        order_no="logis_ordr_1",
        date="2024-03-01",
        order_detail="Sample order details 1",
        invoice="INV-001",
        packing_status="Packing",
        payment_method="Credit Card",
        order_track="In Progress",
    ),
    Order(
        order_no="logis_ordr_2",
        date="2024-03-02",
        order_detail="Sample order details 2",
        invoice="INV-002",
        packing_status="Packing",
        payment_method="Cash",
        order_track="Shipped",
    ),
)


def init_ledger(
    ledger: Ledger,
    logger: logging.Logger | None = None,
    orders: tuple[Order, ...] = SAMPLE_ORDERS,
) -> list[str]:
    """Write the sample orders straight to the ledger.

    This bypasses the existence gate: running it again appends a new
    version of each sample order. Returns the keys written.
    """
    logger = logger or logging.getLogger(__name__)
    log_start(logger, Operation.INIT_LEDGER, None)
    written: list[str] = []
    for order in orders:
        payload = encode_order(order, key=order.order_no, operation=Operation.INIT_LEDGER)
        with ledger_call(order.order_no, Operation.INIT_LEDGER):
            ledger.put(order.order_no.encode("utf-8"), payload)
        written.append(order.order_no)
    logger.info("%s wrote %d sample orders", Operation.INIT_LEDGER.value, len(written))
    return written
