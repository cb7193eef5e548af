"""Dashboard - one response with KPIs, account list and recent activity."""

from sqlalchemy import update

from shopledger.models.order import Order


async def test_empty_dashboard(client):
    res = await client.get("/api/v1/dashboard")
    assert res.status_code == 200
    body = res.json()
    assert body["accounts"] == []
    assert body["recent_orders"] == []
    assert body["kpis"]["monthly_revenue_minor"] == 0
    assert body["total_customers"] == 0


async def test_dashboard_after_completed_order(client, accounts, order_payload):
    await client.post(
        "/api/v1/orders",
        json=order_payload(status="completed", paid_amount_minor=20_000),
    )
    await client.post("/api/v1/orders", json=order_payload(status="draft"))
    await client.post("/api/v1/transactions", json={
        "transaction_type": "expense", "amount_minor": 2_000,
        "from_account_id": str(accounts["cash"].id),
    })

    body = (await client.get("/api/v1/dashboard")).json()
    kpis = body["kpis"]
    assert kpis["monthly_revenue_minor"] == 40_000
    assert kpis["monthly_labor_cost_minor"] == 8_000
    assert kpis["monthly_shipping_cost_minor"] == 2_000
    assert kpis["monthly_net_profit_minor"] == 15_000
    assert kpis["monthly_expenses_minor"] == 2_000
    assert kpis["orders_completed"] == 1
    assert kpis["orders_pending"] == 1

    assert len(body["recent_orders"]) == 2
    assert body["recent_orders"][0]["customer_name"] == "Nimal Perera"
    assert len(body["recent_transactions"]) == 4
    assert body["recent_profit_distributions"][0]["order_number"].startswith("WC-")
    assert body["total_customers"] == 1
    assert body["total_products"] == 1


async def test_recent_orders_capped_at_five(client, test_db, order_payload):
    for _ in range(7):
        await client.post("/api/v1/orders", json=order_payload())
    body = (await client.get("/api/v1/dashboard")).json()
    assert len(body["recent_orders"]) == 5


async def test_inactive_orders_left_out(client, test_db, order_payload):
    await client.post("/api/v1/orders", json=order_payload())
    await test_db.execute(update(Order).values(is_active=False))
    await test_db.commit()
    body = (await client.get("/api/v1/dashboard")).json()
    assert body["recent_orders"] == []
    assert body["kpis"]["monthly_revenue_minor"] == 0
