"""ORM Models - SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Money columns are BigInteger minor units

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete before create_all
      and Alembic autogenerate run
"""

from shopledger.models.account import Account  # noqa: F401
from shopledger.models.customer import Customer  # noqa: F401
from shopledger.models.product_category import ProductCategory  # noqa: F401
from shopledger.models.product import Product  # noqa: F401
from shopledger.models.warehouse import Warehouse  # noqa: F401
from shopledger.models.inventory import Inventory  # noqa: F401
from shopledger.models.inventory_batch import InventoryBatch  # noqa: F401
from shopledger.models.stock_movement import StockMovement  # noqa: F401
from shopledger.models.worker import Worker  # noqa: F401
from shopledger.models.order import Order  # noqa: F401
from shopledger.models.order_item import OrderItem  # noqa: F401
from shopledger.models.worker_daily_work import WorkerDailyWork  # noqa: F401
from shopledger.models.worker_payment_record import WorkerPaymentRecord  # noqa: F401
from shopledger.models.standalone_payment import StandalonePayment  # noqa: F401
from shopledger.models.transaction import Transaction  # noqa: F401
from shopledger.models.profit_distribution import ProfitDistribution  # noqa: F401
from shopledger.models.system_setting import SystemSetting  # noqa: F401
from shopledger.models.document_sequence import DocumentSequence  # noqa: F401
