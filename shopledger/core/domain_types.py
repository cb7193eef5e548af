"""Domain Types - enums and identity types that replace bare strings across the codebase.

Invariants:
    - All valid states encoded as Enums, no raw string matching in services
    - Money is always an int of minor units (MinorUnits), never a float
    - Enum values equal the strings stored in the database columns

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

OrderId = NewType("OrderId", UUID)
AccountId = NewType("AccountId", UUID)
WorkerId = NewType("WorkerId", UUID)
ProductId = NewType("ProductId", UUID)


# ─── Value Types ─────────────────────────────────────────────────

MinorUnits = NewType("MinorUnits", int)   # amount × 100
Percentage = NewType("Percentage", float)  # 0.0 to 100.0


# ─── Enums ───────────────────────────────────────────────────────

class AccountType(str, Enum):
    PERSONAL = "personal"
    BUSINESS = "business"
    LOAN = "loan"


class ProfitRole(str, Enum):
    """Which profit-share stakeholder an account receives money for."""
    PARTNER_ONE = "partner_one"
    PARTNER_TWO = "partner_two"
    BUSINESS = "business"


class OrderStatus(str, Enum):
    """Order lifecycle states, maps to orders.status."""
    DRAFT = "draft"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class OrderPlatform(str, Enum):
    WEBSITE = "website"
    ETSY = "etsy"
    LOCAL = "local"


class OrderPriority(str, Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"


class PaymentStatus(str, Enum):
    """Customer payment state of an order."""
    PENDING = "pending"
    ADVANCE = "advance"
    PARTIAL = "partial"
    FULL = "full"


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"


class PaymentMethod(str, Enum):
    CASH = "cash"
    BANK_TRANSFER = "bank_transfer"
    CHECK = "check"
    CREDIT_CARD = "credit_card"
    OTHER = "other"


class ReferenceType(str, Enum):
    """What a transaction or stock movement points back to."""
    ORDER = "order"
    PROFIT_SHARE = "profit_share"
    ORDER_REVERSAL = "order_reversal"
    MANUAL = "manual"


class MovementType(str, Enum):
    RECEIPT = "receipt"
    ISSUE = "issue"
    ADJUSTMENT = "adjustment"
    TRANSFER = "transfer"


class AttendanceType(str, Enum):
    FULL_DAY = "full_day"
    HALF_DAY = "half_day"
    ABSENT = "absent"


class WorkerPaymentStatus(str, Enum):
    """Settlement state of labor owed for one order item."""
    PENDING = "pending"
    PARTIAL = "partial"
    COMPLETED = "completed"


class StandalonePaymentType(str, Enum):
    ADVANCE = "advance"
    FULL = "full"


PROFIT_DISTRIBUTION_CATEGORY = "profit_distribution"
