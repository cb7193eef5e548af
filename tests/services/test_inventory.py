"""Inventory - manual stock changes, movement log and production batches.

Tests:
    - Receipts create the default warehouse and inventory row on first use
    - Receipts update the moving-average unit cost
    - Direction rules for receipt / issue, zero deltas rejected
    - Low-stock flag, movement listing
    - Batch totals follow quantity × per-item labor cost
"""

import uuid

from sqlalchemy import select

from shopledger.models.product import Product
from shopledger.models.warehouse import Warehouse


async def test_receipt_creates_default_warehouse(client, test_db):
    product = Product(name="Mahogany Stool")
    test_db.add(product)
    await test_db.commit()

    res = await client.post("/api/v1/inventory/adjust", json={
        "product_id": str(product.id), "quantity_delta": 5,
        "movement_type": "receipt", "unit_cost_minor": 4_000,
    })
    assert res.status_code == 200
    row = res.json()
    assert row["stock_quantity"] == 5
    assert row["average_cost_minor"] == 4_000
    assert row["warehouse_name"] == "Main Warehouse"

    warehouses = (await test_db.execute(select(Warehouse.name))).scalars().all()
    assert warehouses == ["Main Warehouse"]


async def test_receipt_updates_average_cost(client, stocked_product):
    res = await client.post("/api/v1/inventory/adjust", json={
        "product_id": str(stocked_product.id), "quantity_delta": 10,
        "movement_type": "receipt", "unit_cost_minor": 5_000,
    })
    row = res.json()
    assert row["stock_quantity"] == 20
    assert row["average_cost_minor"] == 4_000


async def test_adjustment_can_reduce_stock(client, stocked_product):
    res = await client.post("/api/v1/inventory/adjust", json={
        "product_id": str(stocked_product.id), "quantity_delta": -9,
        "notes": "Damaged in storage",
    })
    row = res.json()
    assert row["stock_quantity"] == 1
    assert row["is_low_stock"] is True


async def test_receipt_with_negative_delta_rejected(client, stocked_product):
    res = await client.post("/api/v1/inventory/adjust", json={
        "product_id": str(stocked_product.id), "quantity_delta": -1,
        "movement_type": "receipt",
    })
    assert res.status_code == 400


async def test_issue_with_positive_delta_rejected(client, stocked_product):
    res = await client.post("/api/v1/inventory/adjust", json={
        "product_id": str(stocked_product.id), "quantity_delta": 3,
        "movement_type": "issue",
    })
    assert res.status_code == 400


async def test_zero_delta_rejected(client, stocked_product):
    res = await client.post("/api/v1/inventory/adjust", json={
        "product_id": str(stocked_product.id), "quantity_delta": 0,
    })
    assert res.status_code == 400


async def test_unknown_product_returns_404(client):
    res = await client.post("/api/v1/inventory/adjust", json={
        "product_id": str(uuid.uuid4()), "quantity_delta": 1,
    })
    assert res.status_code == 404


async def test_movements_listed_per_product(client, stocked_product):
    await client.post("/api/v1/inventory/adjust", json={
        "product_id": str(stocked_product.id), "quantity_delta": -2,
    })
    res = await client.get(
        "/api/v1/inventory/movements", params={"product_id": str(stocked_product.id)},
    )
    assert res.status_code == 200
    movements = res.json()
    assert len(movements) == 1
    assert movements[0]["movement_type"] == "adjustment"
    assert movements[0]["quantity"] == -2
    assert movements[0]["reference_type"] == "manual"


async def test_inventory_rows_listed(client, stocked_product):
    rows = (await client.get("/api/v1/inventory")).json()
    assert len(rows) == 1
    assert rows[0]["product_name"] == "Teak Chair"
    assert rows[0]["is_low_stock"] is False


# ─── Batches ─────────────────────────────────────────────────────

async def test_batch_total_labor_cost(client, stocked_product):
    res = await client.post("/api/v1/inventory/batches", json={
        "product_id": str(stocked_product.id), "quantity": 12,
        "labor_cost_per_item_minor": 1_500,
    })
    assert res.status_code == 201
    batch = res.json()
    assert batch["total_labor_cost_minor"] == 18_000

    updated = await client.put(f"/api/v1/inventory/batches/{batch['id']}", json={
        "product_id": str(stocked_product.id), "quantity": 4,
        "labor_cost_per_item_minor": 1_500,
    })
    assert updated.json()["total_labor_cost_minor"] == 6_000

    listed = (await client.get("/api/v1/inventory/batches")).json()
    assert listed[0]["product_name"] == "Teak Chair"


async def test_batch_quantity_must_be_positive(client, stocked_product):
    res = await client.post("/api/v1/inventory/batches", json={
        "product_id": str(stocked_product.id), "quantity": 0,
        "labor_cost_per_item_minor": 100,
    })
    assert res.status_code == 400


async def test_delete_batch(client, stocked_product):
    created = await client.post("/api/v1/inventory/batches", json={
        "product_id": str(stocked_product.id), "quantity": 2,
    })
    batch_id = created.json()["id"]
    assert (await client.delete(f"/api/v1/inventory/batches/{batch_id}")).status_code == 204
    assert (await client.get("/api/v1/inventory/batches")).json() == []
    assert (await client.delete(f"/api/v1/inventory/batches/{batch_id}")).status_code == 404
