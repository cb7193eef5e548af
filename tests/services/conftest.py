"""Service test fixtures - async DB, FastAPI test client and seed data.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - db_manager patched so the readiness check sees the test engine

Design Decisions:
    - SQLite in-memory with StaticPool: every session shares the one connection,
      so rows committed by the test client are visible to test_db
    - Seed fixtures commit through test_db before the client runs
"""

from datetime import date

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.pool import StaticPool
from httpx import ASGITransport, AsyncClient

from shopledger.core.domain_types import AccountType, ProfitRole
from shopledger.db.base import Base
from shopledger.infrastructure.database import get_db, DatabaseSessionManager
from shopledger.models.account import Account
from shopledger.models.customer import Customer
from shopledger.models.inventory import Inventory
from shopledger.models.product import Product
from shopledger.models.warehouse import Warehouse
from shopledger.models.worker import Worker
import shopledger.infrastructure.database as db_module
import shopledger.models  # noqa: F401
from shopledger.main import app


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


# ─── Seed data ───────────────────────────────────────────────────

@pytest.fixture
async def accounts(test_db):
    """Three profit-share accounts plus an ordinary cash account."""
    rows = {
        "partner_one": Account(
            account_name="Partner One", account_type=AccountType.PERSONAL.value,
            profit_role=ProfitRole.PARTNER_ONE.value,
        ),
        "partner_two": Account(
            account_name="Partner Two", account_type=AccountType.PERSONAL.value,
            profit_role=ProfitRole.PARTNER_TWO.value,
        ),
        "business": Account(
            account_name="Business Reserve", account_type=AccountType.BUSINESS.value,
            profit_role=ProfitRole.BUSINESS.value,
        ),
        "cash": Account(
            account_name="Shop Cash", account_type=AccountType.BUSINESS.value,
            opening_balance_minor=100_000, balance_minor=100_000,
        ),
    }
    test_db.add_all(rows.values())
    await test_db.commit()
    return rows


@pytest.fixture
async def customer(test_db):
    row = Customer(name="Nimal Perera", city="Colombo", tags=[])
    test_db.add(row)
    await test_db.commit()
    return row


@pytest.fixture
async def stocked_product(test_db):
    """A catalog product with 10 units in the main warehouse."""
    product = Product(
        name="Teak Chair", standard_price_minor=10_000,
        labor_cost_minor=2_000, material_cost_minor=1_000,
    )
    warehouse = Warehouse(name="Main Warehouse")
    test_db.add_all([product, warehouse])
    await test_db.flush()
    test_db.add(Inventory(
        product_id=product.id, warehouse_id=warehouse.id,
        stock_quantity=10, average_cost_minor=3_000, minimum_stock_level=2,
    ))
    await test_db.commit()
    return product


@pytest.fixture
async def worker(test_db):
    row = Worker(name="Sunil Silva", hourly_rate_minor=50_000, hire_date=date(2025, 1, 6))
    test_db.add(row)
    await test_db.commit()
    return row


@pytest.fixture
def order_payload(customer, stocked_product):
    """Build an order request body; two chairs at 100.00 each by default.

    total 20_000, labor 4_000, shipping 1_000 → net profit 15_000.
    """
    def _build(**overrides) -> dict:
        body = {
            "customer_id": str(customer.id),
            "order_date": date.today().isoformat(),
            "status": "confirmed",
            "platform": "local",
            "shipping_cost_minor": 1_000,
            "paid_amount_minor": 5_000,
            "items": [{
                "product_id": str(stocked_product.id),
                "item_name": "Teak Chair",
                "quantity": 2,
                "unit_price_minor": 10_000,
                "labor_cost_minor": 2_000,
                "material_cost_minor": 1_000,
            }],
        }
        body.update(overrides)
        return body
    return _build
