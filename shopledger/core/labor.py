"""Labor Costs - unified labor cost rows, payroll summary, and order payment records.

Invariants:
    - Labor cost of a line = quantity × labor cost per item
    - A new worker payment record owes its full total (remaining = total, status pending)
    - remaining payroll balance = total labor cost (inventory + orders) − total payments
    - Labor rows are ordered newest first
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Hashable, Iterable, Protocol

from shopledger.core.domain_types import WorkerPaymentStatus
from shopledger.core.order_totals import LineItemLike

LABOR_SOURCE_INVENTORY = "inventory"
LABOR_SOURCE_ORDER = "order"


class LaborEntryLike(Protocol):
    """Shape shared by inventory batches and worker payment records."""
    product_name: str
    quantity: int
    labor_cost_per_item_minor: int
    total_labor_cost_minor: int
    created_at: datetime


class PaymentLike(Protocol):
    amount_minor: int


@dataclass(frozen=True)
class LaborEntry:
    """LaborEntryLike for rows whose product name lives in another table."""
    product_name: str
    quantity: int
    labor_cost_per_item_minor: int
    total_labor_cost_minor: int
    created_at: datetime


@dataclass(frozen=True)
class LaborCostRow:
    created_at: datetime
    source: str
    product_name: str
    quantity: int
    cost_per_item_minor: int
    total_cost_minor: int


@dataclass(frozen=True)
class PayrollSummary:
    total_labor_cost_minor: int
    total_payments_minor: int

    @property
    def remaining_balance_minor(self) -> int:
        return self.total_labor_cost_minor - self.total_payments_minor


def _row(entry: LaborEntryLike, source: str) -> LaborCostRow:
    return LaborCostRow(
        created_at=entry.created_at,
        source=source,
        product_name=entry.product_name,
        quantity=entry.quantity,
        cost_per_item_minor=entry.labor_cost_per_item_minor,
        total_cost_minor=entry.total_labor_cost_minor,
    )


def build_labor_cost_rows(
    batches: Iterable[LaborEntryLike],
    payment_records: Iterable[LaborEntryLike],
) -> list[LaborCostRow]:
    """Merge inventory batches and order payment records, newest first."""
    rows = [_row(b, LABOR_SOURCE_INVENTORY) for b in batches]
    rows.extend(_row(r, LABOR_SOURCE_ORDER) for r in payment_records)
    return sorted(rows, key=lambda r: r.created_at, reverse=True)


def summarize_payroll(
    batches: Iterable[LaborEntryLike],
    payment_records: Iterable[LaborEntryLike],
    standalone_payments: Iterable[PaymentLike],
) -> PayrollSummary:
    labor = sum(b.total_labor_cost_minor for b in batches)
    labor += sum(r.total_labor_cost_minor for r in payment_records)
    return PayrollSummary(
        total_labor_cost_minor=labor,
        total_payments_minor=sum(p.amount_minor for p in standalone_payments),
    )


def resolve_item_worker(
    item_worker_id: Hashable | None, order_worker_id: Hashable | None,
) -> Hashable | None:
    """Item-level assignment wins over the order-level one."""
    return item_worker_id or order_worker_id


def build_payment_record(
    worker_id: Hashable, order_id: Hashable, item: LineItemLike,
) -> dict:
    """Column values of the payment record a worker is owed for one order item."""
    total = item.quantity * item.labor_cost_minor
    return {
        "worker_id": worker_id,
        "order_id": order_id,
        "product_name": item.item_name,
        "quantity": item.quantity,
        "labor_cost_per_item_minor": item.labor_cost_minor,
        "total_labor_cost_minor": total,
        "advance_payment_minor": 0,
        "remaining_balance_minor": total,
        "payment_status": WorkerPaymentStatus.PENDING.value,
    }
