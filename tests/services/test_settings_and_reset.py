"""Settings & Data Reset - profit shares, business info and confirmed resets.

Invariants:
    - Profit shares are validated before being stored
    - Saved shares drive the next distribution
    - Resets need the exact confirmation phrase
    - Monthly reset keeps balances (as new opening balances); full reset zeroes them

Tests:
    - GET defaults, PUT valid/invalid shares, business info merge
    - Monthly and full reset effects checked in the database
"""

from sqlalchemy import func, select

from shopledger.models.account import Account
from shopledger.models.customer import Customer
from shopledger.models.document_sequence import DocumentSequence
from shopledger.models.inventory import Inventory
from shopledger.models.order import Order
from shopledger.models.profit_distribution import ProfitDistribution
from shopledger.models.stock_movement import StockMovement
from shopledger.models.transaction import Transaction


async def _count(db, model) -> int:
    return (await db.execute(select(func.count()).select_from(model))).scalar_one()


async def test_profit_sharing_defaults(client):
    res = await client.get("/api/v1/settings/profit-sharing")
    assert res.status_code == 200
    assert res.json() == {
        "partner_one_share": 33.33, "partner_two_share": 33.33, "business_share": 33.34,
    }


async def test_invalid_profit_shares_rejected(client):
    res = await client.put("/api/v1/settings/profit-sharing", json={
        "partner_one_share": 50, "partner_two_share": 40, "business_share": 20,
    })
    assert res.status_code == 400
    assert (await client.get("/api/v1/settings")).json() == {}


async def test_saved_shares_drive_distribution(client, test_db, accounts, order_payload):
    res = await client.put("/api/v1/settings/profit-sharing", json={
        "partner_one_share": 50, "partner_two_share": 30, "business_share": 20,
    })
    assert res.status_code == 200

    await client.post(
        "/api/v1/orders",
        json=order_payload(status="completed", paid_amount_minor=20_000),
    )
    dist = (await test_db.execute(select(ProfitDistribution))).scalar_one()
    assert dist.partner_one_share_minor == 7_500
    assert dist.partner_two_share_minor == 4_500
    assert dist.business_share_minor == 3_000


async def test_business_info_round_trip(client):
    defaults = (await client.get("/api/v1/settings/business-info")).json()
    assert defaults["company_name"] == "Wood Ceylon"

    res = await client.put("/api/v1/settings/business-info", json={
        "company_name": "Wood Ceylon", "phone": "0112345678",
    })
    assert res.status_code == 200
    stored = (await client.get("/api/v1/settings/business-info")).json()
    assert stored["phone"] == "0112345678"
    assert "business_info" in (await client.get("/api/v1/settings")).json()


# ─── Resets ──────────────────────────────────────────────────────

async def _seed_activity(client, accounts, order_payload):
    await client.post(
        "/api/v1/orders",
        json=order_payload(status="completed", paid_amount_minor=20_000),
    )
    await client.post("/api/v1/transactions", json={
        "transaction_type": "expense", "amount_minor": 10_000,
        "from_account_id": str(accounts["cash"].id),
    })


async def test_reset_requires_confirmation(client, test_db, accounts, order_payload):
    await _seed_activity(client, accounts, order_payload)
    res = await client.post("/api/v1/settings/reset/monthly", json={"confirm_text": "reset"})
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "RESET_NOT_CONFIRMED"
    assert await _count(test_db, Transaction) == 4


async def test_monthly_reset_keeps_balances(
    client, test_db, accounts, order_payload, stocked_product,
):
    await _seed_activity(client, accounts, order_payload)

    res = await client.post("/api/v1/settings/reset/monthly", json={"confirm_text": "RESET"})
    assert res.status_code == 200
    assert res.json()["deleted"]["transactions"] == 4

    assert await _count(test_db, Transaction) == 0
    assert await _count(test_db, ProfitDistribution) == 0
    assert (await client.get("/api/v1/orders")).json()["orders"] == []

    cash = (
        await test_db.execute(
            select(Account.balance_minor, Account.opening_balance_minor)
            .where(Account.id == accounts["cash"].id)
        )
    ).one()
    assert cash.balance_minor == 90_000
    assert cash.opening_balance_minor == 90_000

    # stock and its history are master data for a monthly close
    assert await _count(test_db, StockMovement) == 1
    clean = await client.post("/api/v1/accounts/reconcile")
    assert clean.json()["drift"] == []


async def test_monthly_reset_restarts_order_numbers(client, test_db, accounts, order_payload):
    await client.post("/api/v1/orders", json=order_payload())
    await client.post("/api/v1/settings/reset/monthly", json={"confirm_text": "RESET"})

    order_sequences = (
        await test_db.execute(
            select(func.count()).select_from(DocumentSequence)
            .where(DocumentSequence.sequence_key == "order")
        )
    ).scalar_one()
    assert order_sequences == 0

    res = await client.post("/api/v1/orders", json=order_payload())
    assert res.json()["order_number"].endswith("-0001")


async def test_full_reset_zeroes_everything(
    client, test_db, accounts, order_payload, customer, stocked_product,
):
    await _seed_activity(client, accounts, order_payload)

    res = await client.post("/api/v1/settings/reset/all", json={"confirm_text": "RESET ALL"})
    assert res.status_code == 200

    balances = (
        await test_db.execute(select(Account.balance_minor, Account.opening_balance_minor))
    ).all()
    assert all(b == 0 and o == 0 for b, o in balances)
    assert await _count(test_db, StockMovement) == 0
    assert (
        await test_db.execute(
            select(Customer.total_spent_minor).where(Customer.id == customer.id)
        )
    ).scalar_one() == 0
    assert (
        await test_db.execute(
            select(func.count()).select_from(Order).where(Order.is_active.is_(True))
        )
    ).scalar_one() == 0
    # stock levels are master data and stay
    assert (await test_db.execute(select(Inventory.stock_quantity))).scalar_one() == 8


async def test_full_reset_rejects_monthly_phrase(client, accounts):
    res = await client.post("/api/v1/settings/reset/all", json={"confirm_text": "RESET"})
    assert res.status_code == 400
