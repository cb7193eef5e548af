"""Error Hierarchy - typed, categorized exceptions for all Shop Ledger failure modes.

Invariants:
    - Every error carries a stable code the order form and dashboard switch on
      (NEGATIVE_PROFIT, PROTECTED_TRANSACTION, RESET_NOT_CONFIRMED, ...)
    - Business-rule failures are 400/404/409 and leave the data untouched;
      database failures are 503
    - to_response() produces the REST envelope used by the global handler
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with ShopLedgerError base: FastAPI global handler catches all
    - ErrorContext as dataclass: order/account ids travel with the error into the logs
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone

from shopledger.core.money import format_currency


class ErrorSeverity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    INTERNAL = "internal"
    CONFLICT = "conflict"


@dataclass
class ErrorContext:
    """Ids of the records involved; logged and echoed back to the client."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    order_id: str | None = None
    account_id: str | None = None
    transaction_id: str | None = None
    debug_info: dict[str, Any] | None = None


class ShopLedgerError(Exception):
    """Base exception for all Shop Ledger errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    key: value
                    for key, value in (
                        ("order_id", self.context.order_id),
                        ("account_id", self.context.account_id),
                        ("transaction_id", self.context.transaction_id),
                    )
                    if value is not None
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class BusinessValidationError(ShopLedgerError):
    """Input passed schema validation but violates a business rule."""
    def __init__(self, message: str, field: str | None = None, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field


class InvalidStatusTransitionError(ShopLedgerError):
    """Order status change not allowed by the lifecycle."""
    def __init__(self, current: str, requested: str, context: ErrorContext | None = None):
        super().__init__(
            f"Cannot move order from '{current}' to '{requested}'",
            "INVALID_STATUS_TRANSITION", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 400,
        )
        self.current = current
        self.requested = requested


class NegativeProfitNotAcknowledgedError(ShopLedgerError):
    """Order costs exceed its value and the caller did not confirm."""
    def __init__(
        self, net_profit_minor: int, currency: str = "LKR",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Order has a negative net profit of {format_currency(net_profit_minor, currency)}. "
            "Resubmit with allow_negative_profit=true to proceed.",
            "NEGATIVE_PROFIT", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.WARNING, context, 400,
        )
        self.net_profit_minor = net_profit_minor


class ProfitShareConfigError(ShopLedgerError):
    """Profit share percentages are out of range or do not sum to 100."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_PROFIT_SHARES", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 400,
        )


class ProtectedTransactionError(ShopLedgerError):
    """Profit distribution transactions are owned by their order."""
    def __init__(self, transaction_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.transaction_id = transaction_id
        super().__init__(
            "Profit distribution transactions cannot be deleted. "
            "They are removed together with their order.",
            "PROTECTED_TRANSACTION", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, ctx, 409,
        )


class ResetNotConfirmedError(ShopLedgerError):
    """Data reset attempted without the exact confirmation phrase."""
    def __init__(self, expected: str, context: ErrorContext | None = None):
        super().__init__(
            f'Type "{expected}" to confirm',
            "RESET_NOT_CONFIRMED", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 400,
        )


class ResourceNotFoundError(ShopLedgerError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


class ConflictError(ShopLedgerError):
    """Concurrent modification or uniqueness conflict detected."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(ShopLedgerError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
