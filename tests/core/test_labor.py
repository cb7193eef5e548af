"""Labor Costs - payment records, merged labor rows and payroll summary."""

from dataclasses import dataclass
from datetime import datetime, timezone

from shopledger.core.labor import (
    LABOR_SOURCE_INVENTORY, LABOR_SOURCE_ORDER, LaborEntry, build_labor_cost_rows,
    build_payment_record, resolve_item_worker, summarize_payroll,
)


@dataclass
class Item:
    item_name: str
    quantity: int
    unit_price_minor: int
    labor_cost_minor: int
    material_cost_minor: int = 0


@dataclass
class Payment:
    amount_minor: int


def _entry(name, qty, per_item, day):
    return LaborEntry(
        product_name=name,
        quantity=qty,
        labor_cost_per_item_minor=per_item,
        total_labor_cost_minor=qty * per_item,
        created_at=datetime(2026, 3, day, tzinfo=timezone.utc),
    )


def test_payment_record_owes_full_total():
    record = build_payment_record("w1", "o1", Item("Dining Table", 3, 50_000, 4_000))
    assert record["total_labor_cost_minor"] == 12_000
    assert record["remaining_balance_minor"] == 12_000
    assert record["advance_payment_minor"] == 0
    assert record["payment_status"] == "pending"
    assert record["product_name"] == "Dining Table"


def test_item_worker_wins_over_order_worker():
    assert resolve_item_worker("item-worker", "order-worker") == "item-worker"
    assert resolve_item_worker(None, "order-worker") == "order-worker"
    assert resolve_item_worker(None, None) is None


def test_labor_rows_merged_newest_first():
    batches = [_entry("Stool", 10, 500, 1), _entry("Shelf", 2, 1_000, 5)]
    records = [_entry("Chair", 4, 800, 3)]
    rows = build_labor_cost_rows(batches, records)

    assert [r.product_name for r in rows] == ["Shelf", "Chair", "Stool"]
    assert rows[1].source == LABOR_SOURCE_ORDER
    assert rows[0].source == LABOR_SOURCE_INVENTORY
    assert rows[0].total_cost_minor == 2_000


def test_payroll_summary_remaining_balance():
    summary = summarize_payroll(
        [_entry("Stool", 10, 500, 1)],
        [_entry("Chair", 4, 800, 3)],
        [Payment(3_000), Payment(1_000)],
    )
    assert summary.total_labor_cost_minor == 5_000 + 3_200
    assert summary.total_payments_minor == 4_000
    assert summary.remaining_balance_minor == 4_200
