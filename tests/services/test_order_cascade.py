"""Order Cascade - create, update and delete through the API, checked in the database.

Invariants:
    - Creating an order issues stock, writes worker payment records and, when
      completed and fully paid, distributes profit exactly once
    - Updating restocks previous issues before issuing again
    - Deleting reverses every balance effect and restocks
    - A failure anywhere in the cascade leaves nothing behind

Tests:
    - Happy paths for create/update/delete with DB assertions
    - Validation failures (empty order, negative profit, backward status)
    - Rollback when a later cascade step fails
"""

import uuid
from datetime import date

from sqlalchemy import func, select

from shopledger.core.errors import ConflictError
from shopledger.core.profit_sharing import ProfitSplit
from shopledger.models.account import Account
from shopledger.models.customer import Customer
from shopledger.models.document_sequence import DocumentSequence
from shopledger.models.inventory import Inventory
from shopledger.models.order import Order
from shopledger.models.profit_distribution import ProfitDistribution
from shopledger.models.stock_movement import StockMovement
from shopledger.models.transaction import Transaction
from shopledger.models.worker_payment_record import WorkerPaymentRecord
from shopledger.services.profit import ProfitDistributor


async def _stock(db, product_id) -> int:
    result = await db.execute(
        select(Inventory.stock_quantity).where(Inventory.product_id == product_id)
    )
    return result.scalar_one()


async def _balance(db, account) -> int:
    result = await db.execute(
        select(Account.balance_minor).where(Account.id == account.id)
    )
    return result.scalar_one()


async def _count(db, model) -> int:
    return (await db.execute(select(func.count()).select_from(model))).scalar_one()


# ─── Create ──────────────────────────────────────────────────────

async def test_create_order_returns_totals_and_number(client, order_payload):
    res = await client.post("/api/v1/orders", json=order_payload())
    assert res.status_code == 201
    body = res.json()
    assert body["order_number"] == f"WC-{date.today().year}-0001"
    assert body["total_amount_minor"] == 20_000
    assert body["total_labor_cost_minor"] == 4_000
    assert body["total_material_cost_minor"] == 2_000
    assert body["net_profit_minor"] == 15_000
    assert body["remaining_payment_minor"] == 15_000
    assert body["payment_status"] == "advance"
    assert body["customer_name"] == "Nimal Perera"
    assert len(body["items"]) == 1


async def test_order_numbers_increase(client, order_payload):
    first = await client.post("/api/v1/orders", json=order_payload())
    second = await client.post("/api/v1/orders", json=order_payload())
    year = date.today().year
    assert first.json()["order_number"] == f"WC-{year}-0001"
    assert second.json()["order_number"] == f"WC-{year}-0002"


async def test_create_issues_stock(client, test_db, order_payload, stocked_product):
    res = await client.post("/api/v1/orders", json=order_payload())
    order_id = uuid.UUID(res.json()["id"])

    assert await _stock(test_db, stocked_product.id) == 8
    movements = (
        await test_db.execute(
            select(StockMovement).where(StockMovement.reference_id == order_id)
        )
    ).scalars().all()
    assert len(movements) == 1
    assert movements[0].movement_type == "issue"
    assert movements[0].quantity == 2
    assert movements[0].reference_type == "order"


async def test_custom_item_does_not_touch_stock(client, test_db, order_payload, stocked_product):
    payload = order_payload(items=[{
        "item_name": "Custom Bookshelf", "quantity": 1,
        "unit_price_minor": 50_000, "labor_cost_minor": 10_000,
    }])
    res = await client.post("/api/v1/orders", json=payload)
    assert res.status_code == 201
    assert await _stock(test_db, stocked_product.id) == 10


async def test_create_writes_worker_payment_record(client, test_db, order_payload, worker):
    res = await client.post(
        "/api/v1/orders", json=order_payload(assigned_worker_id=str(worker.id)),
    )
    assert res.status_code == 201

    records = (await test_db.execute(select(WorkerPaymentRecord))).scalars().all()
    assert len(records) == 1
    assert records[0].worker_id == worker.id
    assert records[0].total_labor_cost_minor == 4_000
    assert records[0].remaining_balance_minor == 4_000
    assert records[0].payment_status == "pending"


async def test_unknown_worker_rejected(client, test_db, order_payload):
    res = await client.post(
        "/api/v1/orders", json=order_payload(assigned_worker_id=str(uuid.uuid4())),
    )
    assert res.status_code == 404
    assert await _count(test_db, Order) == 0


async def test_completed_paid_order_distributes_profit(
    client, test_db, order_payload, accounts,
):
    res = await client.post(
        "/api/v1/orders",
        json=order_payload(status="completed", paid_amount_minor=20_000),
    )
    assert res.status_code == 201

    dist = (await test_db.execute(select(ProfitDistribution))).scalar_one()
    assert dist.total_profit_minor == 15_000
    assert (
        dist.partner_one_share_minor + dist.partner_two_share_minor
        + dist.business_share_minor
    ) == 15_000
    assert await _balance(test_db, accounts["partner_one"]) == dist.partner_one_share_minor
    assert await _balance(test_db, accounts["partner_two"]) == dist.partner_two_share_minor
    assert await _balance(test_db, accounts["business"]) == dist.business_share_minor
    assert await _balance(test_db, accounts["cash"]) == 100_000

    txns = (await test_db.execute(select(Transaction))).scalars().all()
    assert len(txns) == 3
    assert {t.category for t in txns} == {"profit_distribution"}
    assert {t.reference_id for t in txns} == {dist.id}


async def test_even_partner_split_of_odd_profit_posts_exactly_the_profit(
    client, test_db, order_payload, accounts,
):
    res = await client.put("/api/v1/settings/profit-sharing", json={
        "partner_one_share": 50, "partner_two_share": 50, "business_share": 0,
    })
    assert res.status_code == 200

    res = await client.post(
        "/api/v1/orders",
        json=order_payload(
            status="completed", paid_amount_minor=20_000, shipping_cost_minor=999,
        ),
    )
    assert res.status_code == 201

    dist = (await test_db.execute(select(ProfitDistribution))).scalar_one()
    assert dist.total_profit_minor == 15_001
    assert dist.business_share_minor == 0
    posted = (
        await test_db.execute(select(func.sum(Transaction.amount_minor)))
    ).scalar_one()
    assert posted == dist.total_profit_minor
    assert await _balance(test_db, accounts["partner_one"]) == 7_501
    assert await _balance(test_db, accounts["partner_two"]) == 7_500
    assert await _balance(test_db, accounts["business"]) == 0
    assert await _count(test_db, Transaction) == 2


async def test_negative_share_aborts_the_order(
    client, test_db, order_payload, accounts, monkeypatch,
):
    monkeypatch.setattr(
        "shopledger.services.profit.split_profit",
        lambda total, shares: ProfitSplit(total, total, 1, -1),
    )
    res = await client.post(
        "/api/v1/orders",
        json=order_payload(status="completed", paid_amount_minor=20_000),
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_PROFIT_SHARES"
    assert await _count(test_db, Order) == 0
    assert await _count(test_db, ProfitDistribution) == 0
    assert await _count(test_db, Transaction) == 0


async def test_partially_paid_order_not_distributed(client, test_db, order_payload, accounts):
    await client.post(
        "/api/v1/orders",
        json=order_payload(status="completed", paid_amount_minor=19_999),
    )
    assert await _count(test_db, ProfitDistribution) == 0
    assert await _count(test_db, Transaction) == 0


async def test_distribution_without_stakeholder_accounts(client, test_db, order_payload):
    res = await client.post(
        "/api/v1/orders",
        json=order_payload(status="completed", paid_amount_minor=20_000),
    )
    assert res.status_code == 201
    assert await _count(test_db, ProfitDistribution) == 1
    assert await _count(test_db, Transaction) == 0


# ─── Validation ──────────────────────────────────────────────────

async def test_empty_order_rejected(client, test_db, order_payload):
    res = await client.post("/api/v1/orders", json=order_payload(items=[]))
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"
    assert await _count(test_db, Order) == 0


async def test_negative_profit_needs_acknowledgement(
    client, test_db, order_payload, stocked_product,
):
    items = [{
        "product_id": str(stocked_product.id), "item_name": "Teak Chair",
        "quantity": 2, "unit_price_minor": 10_000, "labor_cost_minor": 15_000,
    }]
    res = await client.post("/api/v1/orders", json=order_payload(items=items))
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "NEGATIVE_PROFIT"
    assert "-LKR 110.00" in res.json()["error"]["message"]
    assert await _count(test_db, Order) == 0
    assert await _stock(test_db, stocked_product.id) == 10

    res = await client.post(
        "/api/v1/orders",
        json=order_payload(items=items, allow_negative_profit=True),
    )
    assert res.status_code == 201
    assert res.json()["net_profit_minor"] == -11_000


async def test_negative_profit_order_records_no_distribution(
    client, test_db, order_payload, accounts,
):
    items = [{"item_name": "Repair", "quantity": 1, "unit_price_minor": 1_000,
              "labor_cost_minor": 5_000}]
    res = await client.post(
        "/api/v1/orders",
        json=order_payload(
            items=items, status="completed", paid_amount_minor=1_000,
            allow_negative_profit=True,
        ),
    )
    assert res.status_code == 201
    assert await _count(test_db, ProfitDistribution) == 0


async def test_unknown_customer_returns_404(client, order_payload):
    res = await client.post(
        "/api/v1/orders", json=order_payload(customer_id=str(uuid.uuid4())),
    )
    assert res.status_code == 404


async def test_inactive_customer_rejected(client, test_db, order_payload, customer):
    customer.is_active = False
    await test_db.commit()
    res = await client.post("/api/v1/orders", json=order_payload())
    assert res.status_code == 400


# ─── Update ──────────────────────────────────────────────────────

async def test_update_restocks_before_reissuing(
    client, test_db, order_payload, stocked_product,
):
    created = await client.post("/api/v1/orders", json=order_payload())
    order_id = created.json()["id"]

    payload = order_payload()
    payload["items"][0]["quantity"] = 3
    res = await client.put(f"/api/v1/orders/{order_id}", json=payload)
    assert res.status_code == 200
    assert res.json()["total_amount_minor"] == 30_000
    assert await _stock(test_db, stocked_product.id) == 7

    movements = (
        await test_db.execute(
            select(StockMovement.movement_type, StockMovement.quantity)
            .where(StockMovement.reference_id == uuid.UUID(order_id))
        )
    ).all()
    assert sorted(tuple(m) for m in movements) == [("issue", 2), ("issue", 3), ("receipt", 2)]


async def test_update_replaces_payment_records(client, test_db, order_payload, worker):
    created = await client.post(
        "/api/v1/orders", json=order_payload(assigned_worker_id=str(worker.id)),
    )
    order_id = created.json()["id"]
    await client.put(
        f"/api/v1/orders/{order_id}",
        json=order_payload(assigned_worker_id=str(worker.id)),
    )
    assert await _count(test_db, WorkerPaymentRecord) == 1


async def test_update_to_completed_distributes_once(
    client, test_db, order_payload, accounts,
):
    created = await client.post("/api/v1/orders", json=order_payload())
    order_id = created.json()["id"]
    done = order_payload(status="completed", paid_amount_minor=20_000)

    first = await client.put(f"/api/v1/orders/{order_id}", json=done)
    assert first.status_code == 200
    partner_one_after_first = await _balance(test_db, accounts["partner_one"])
    assert partner_one_after_first > 0

    second = await client.put(f"/api/v1/orders/{order_id}", json=done)
    assert second.status_code == 200
    assert await _count(test_db, ProfitDistribution) == 1
    assert await _count(test_db, Transaction) == 3
    assert await _balance(test_db, accounts["partner_one"]) == partner_one_after_first


async def test_backward_status_change_rejected(client, test_db, order_payload, stocked_product):
    created = await client.post(
        "/api/v1/orders", json=order_payload(status="in_progress"),
    )
    order_id = created.json()["id"]

    res = await client.put(
        f"/api/v1/orders/{order_id}", json=order_payload(status="draft"),
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_STATUS_TRANSITION"
    assert await _stock(test_db, stocked_product.id) == 8


async def test_cancelled_order_cannot_be_reopened(client, order_payload):
    created = await client.post("/api/v1/orders", json=order_payload(status="cancelled"))
    order_id = created.json()["id"]
    res = await client.put(
        f"/api/v1/orders/{order_id}", json=order_payload(status="confirmed"),
    )
    assert res.status_code == 400


# ─── Delete ──────────────────────────────────────────────────────

async def test_delete_reverses_everything(
    client, test_db, order_payload, accounts, worker, stocked_product,
):
    created = await client.post(
        "/api/v1/orders",
        json=order_payload(
            status="completed", paid_amount_minor=20_000,
            assigned_worker_id=str(worker.id),
        ),
    )
    order_id = created.json()["id"]

    res = await client.delete(f"/api/v1/orders/{order_id}")
    assert res.status_code == 200
    summary = res.json()
    assert summary["transactions_reversed"] == 3
    assert summary["distributions_deleted"] == 1
    assert summary["payment_records_deleted"] == 1
    assert summary["items_deleted"] == 1
    assert summary["units_restocked"] == 2

    for key in ("partner_one", "partner_two", "business"):
        assert await _balance(test_db, accounts[key]) == 0
    assert await _stock(test_db, stocked_product.id) == 10
    assert await _count(test_db, Transaction) == 0
    assert await _count(test_db, ProfitDistribution) == 0

    assert (await client.get(f"/api/v1/orders/{order_id}")).status_code == 404


async def test_deleted_order_hidden_from_list(client, order_payload):
    keep = await client.post("/api/v1/orders", json=order_payload())
    drop = await client.post("/api/v1/orders", json=order_payload())
    await client.delete(f"/api/v1/orders/{drop.json()['id']}")

    res = await client.get("/api/v1/orders")
    ids = [o["id"] for o in res.json()["orders"]]
    assert ids == [keep.json()["id"]]


async def test_delete_twice_returns_404(client, order_payload):
    created = await client.post("/api/v1/orders", json=order_payload())
    order_id = created.json()["id"]
    assert (await client.delete(f"/api/v1/orders/{order_id}")).status_code == 200
    assert (await client.delete(f"/api/v1/orders/{order_id}")).status_code == 404


# ─── Customer totals ─────────────────────────────────────────────

async def test_customer_totals_recomputed(client, test_db, order_payload, customer):
    first = await client.post("/api/v1/orders", json=order_payload())
    await client.post("/api/v1/orders", json=order_payload())

    row = (
        await test_db.execute(
            select(Customer.total_spent_minor, Customer.is_repeat_customer)
            .where(Customer.id == customer.id)
        )
    ).one()
    assert row.total_spent_minor == 40_000
    assert row.is_repeat_customer is True

    await client.delete(f"/api/v1/orders/{first.json()['id']}")
    row = (
        await test_db.execute(
            select(Customer.total_spent_minor, Customer.is_repeat_customer)
            .where(Customer.id == customer.id)
        )
    ).one()
    assert row.total_spent_minor == 20_000
    assert row.is_repeat_customer is False


# ─── Atomicity ───────────────────────────────────────────────────

async def test_failure_in_cascade_rolls_back(
    client, test_db, order_payload, accounts, stocked_product, monkeypatch,
):
    async def fail(self, order, on_date=None):
        raise ConflictError("distribution failed")

    monkeypatch.setattr(ProfitDistributor, "distribute_order_profit", fail)
    res = await client.post(
        "/api/v1/orders",
        json=order_payload(status="completed", paid_amount_minor=20_000),
    )
    assert res.status_code == 409

    assert await _count(test_db, Order) == 0
    assert await _count(test_db, StockMovement) == 0
    assert await _count(test_db, DocumentSequence) == 0
    assert await _stock(test_db, stocked_product.id) == 10
