"""Transactions & Accounts - manual ledger entries, protection and reconciliation.

Invariants:
    - Posting moves balances by the transaction's signed effects
    - Deleting a manual transaction restores the balances
    - Profit distribution transactions cannot be deleted by hand (409)
    - Reconcile reports drift and only repairs it when asked

Tests:
    - income / expense / transfer through POST /transactions
    - Account rules per type answered with 400
    - Delete, protected delete, reconcile and reconcile?apply=true
"""

import uuid

from sqlalchemy import select, update

from shopledger.models.account import Account
from shopledger.models.transaction import Transaction


async def _balance(db, account) -> int:
    result = await db.execute(
        select(Account.balance_minor).where(Account.id == account.id)
    )
    return result.scalar_one()


async def test_income_credits_account(client, test_db, accounts):
    res = await client.post("/api/v1/transactions", json={
        "transaction_type": "income",
        "amount_minor": 25_000,
        "to_account_id": str(accounts["cash"].id),
        "description": "Sale of offcuts",
    })
    assert res.status_code == 201
    body = res.json()
    assert body["transaction_number"].startswith("TXN-")
    assert body["to_account_name"] == "Shop Cash"
    assert await _balance(test_db, accounts["cash"]) == 125_000


async def test_income_drops_from_account(client, accounts):
    res = await client.post("/api/v1/transactions", json={
        "transaction_type": "income",
        "amount_minor": 1_000,
        "from_account_id": str(accounts["business"].id),
        "to_account_id": str(accounts["cash"].id),
    })
    assert res.status_code == 201
    assert res.json()["from_account_id"] is None


async def test_expense_debits_account(client, test_db, accounts):
    res = await client.post("/api/v1/transactions", json={
        "transaction_type": "expense",
        "amount_minor": 30_000,
        "from_account_id": str(accounts["cash"].id),
        "category": "timber",
    })
    assert res.status_code == 201
    assert await _balance(test_db, accounts["cash"]) == 70_000


async def test_transfer_moves_money(client, test_db, accounts):
    res = await client.post("/api/v1/transactions", json={
        "transaction_type": "transfer",
        "amount_minor": 40_000,
        "from_account_id": str(accounts["cash"].id),
        "to_account_id": str(accounts["business"].id),
    })
    assert res.status_code == 201
    assert await _balance(test_db, accounts["cash"]) == 60_000
    assert await _balance(test_db, accounts["business"]) == 40_000


async def test_transfer_to_same_account_rejected(client, accounts):
    cash = str(accounts["cash"].id)
    res = await client.post("/api/v1/transactions", json={
        "transaction_type": "transfer", "amount_minor": 100,
        "from_account_id": cash, "to_account_id": cash,
    })
    assert res.status_code == 400


async def test_expense_without_account_rejected(client, accounts):
    res = await client.post("/api/v1/transactions", json={
        "transaction_type": "expense", "amount_minor": 100,
    })
    assert res.status_code == 400


async def test_non_positive_amount_rejected(client, accounts):
    res = await client.post("/api/v1/transactions", json={
        "transaction_type": "income", "amount_minor": 0,
        "to_account_id": str(accounts["cash"].id),
    })
    assert res.status_code == 400


async def test_unknown_account_returns_404(client, accounts):
    res = await client.post("/api/v1/transactions", json={
        "transaction_type": "income", "amount_minor": 100,
        "to_account_id": str(uuid.uuid4()),
    })
    assert res.status_code == 404


async def test_delete_reverses_balance(client, test_db, accounts):
    created = await client.post("/api/v1/transactions", json={
        "transaction_type": "expense", "amount_minor": 5_000,
        "from_account_id": str(accounts["cash"].id),
    })
    res = await client.delete(f"/api/v1/transactions/{created.json()['id']}")
    assert res.status_code == 204
    assert await _balance(test_db, accounts["cash"]) == 100_000


async def test_profit_distribution_transaction_protected(
    client, test_db, accounts, order_payload,
):
    await client.post(
        "/api/v1/orders",
        json=order_payload(status="completed", paid_amount_minor=20_000),
    )
    txn_id = (
        await test_db.execute(select(Transaction.id).limit(1))
    ).scalar_one()
    before = await _balance(test_db, accounts["business"])

    res = await client.delete(f"/api/v1/transactions/{txn_id}")
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "PROTECTED_TRANSACTION"
    assert await _balance(test_db, accounts["business"]) == before


async def test_list_filters_by_account(client, accounts):
    cash = str(accounts["cash"].id)
    await client.post("/api/v1/transactions", json={
        "transaction_type": "expense", "amount_minor": 500, "from_account_id": cash,
    })
    await client.post("/api/v1/transactions", json={
        "transaction_type": "income", "amount_minor": 700,
        "to_account_id": str(accounts["business"].id),
    })
    res = await client.get("/api/v1/transactions", params={"account_id": cash})
    assert res.status_code == 200
    assert [t["amount_minor"] for t in res.json()] == [500]

    res = await client.get("/api/v1/transactions", params={"type": "income"})
    assert [t["amount_minor"] for t in res.json()] == [700]


# ─── Accounts ────────────────────────────────────────────────────

async def test_create_account_starts_at_opening_balance(client):
    res = await client.post("/api/v1/accounts", json={
        "account_name": "Commercial Bank", "opening_balance_minor": 250_000,
    })
    assert res.status_code == 201
    assert res.json()["balance_minor"] == 250_000


async def test_profit_role_is_unique(client, accounts):
    res = await client.post("/api/v1/accounts", json={
        "account_name": "Second Reserve", "profit_role": "business",
    })
    assert res.status_code == 409


async def test_closing_an_account_releases_its_profit_role(client, accounts):
    business = accounts["business"]
    res = await client.patch(f"/api/v1/accounts/{business.id}", json={"is_active": False})
    assert res.status_code == 200
    assert res.json()["profit_role"] is None

    res = await client.post("/api/v1/accounts", json={
        "account_name": "New Reserve", "profit_role": "business",
    })
    assert res.status_code == 201
    assert res.json()["profit_role"] == "business"


async def test_accounts_listed_with_loans_last(client, accounts):
    await client.post("/api/v1/accounts", json={
        "account_name": "Aardvark Loan", "account_type": "loan",
    })
    names = [a["account_name"] for a in (await client.get("/api/v1/accounts")).json()]
    assert names[-1] == "Aardvark Loan"
    assert names[0] == "Business Reserve"


async def test_reconcile_reports_and_repairs_drift(client, test_db, accounts):
    await client.post("/api/v1/transactions", json={
        "transaction_type": "income", "amount_minor": 10_000,
        "to_account_id": str(accounts["cash"].id),
    })
    await test_db.execute(
        update(Account)
        .where(Account.id == accounts["cash"].id)
        .values(balance_minor=999)
        .execution_options(synchronize_session=False)
    )
    await test_db.commit()

    report = await client.post("/api/v1/accounts/reconcile")
    assert report.status_code == 200
    drift = report.json()["drift"]
    assert len(drift) == 1
    assert drift[0]["expected_minor"] == 110_000
    assert drift[0]["stored_minor"] == 999
    assert await _balance(test_db, accounts["cash"]) == 999

    repaired = await client.post("/api/v1/accounts/reconcile", params={"apply": "true"})
    assert repaired.json()["applied"] is True
    assert await _balance(test_db, accounts["cash"]) == 110_000

    clean = await client.post("/api/v1/accounts/reconcile")
    assert clean.json()["drift"] == []
