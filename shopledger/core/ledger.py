"""Ledger Rules - signed balance effects, reversal, and full recompute.

Invariants:
    - income: +amount on to_account; expense: −amount on from_account;
      transfer: −amount on from_account, +amount on to_account
    - reversal_effects(t) == −balance_effects(t) for every account
    - For every account: balance == opening_balance + Σ balance_effects
    - Profit distribution transactions are protected from manual deletion

Design Decisions:
    - Effects expressed as {account_id: delta}: the shell applies each delta as a
      relative UPDATE, the reconciler sums the same deltas, so both paths share
      one definition of what a transaction does to an account
"""

from collections import defaultdict
from dataclasses import dataclass
from typing import Hashable, Iterable, Protocol

from shopledger.core.domain_types import (
    PROFIT_DISTRIBUTION_CATEGORY, ReferenceType, TransactionType,
)
from shopledger.core.errors import BusinessValidationError


class TransactionLike(Protocol):
    transaction_type: str
    from_account_id: Hashable | None
    to_account_id: Hashable | None
    amount_minor: int


@dataclass(frozen=True)
class BalanceDrift:
    account_id: Hashable
    stored: int
    expected: int

    @property
    def difference(self) -> int:
        return self.stored - self.expected


def validate_transaction_accounts(
    transaction_type: TransactionType,
    from_account_id: Hashable | None,
    to_account_id: Hashable | None,
    amount_minor: int,
) -> None:
    """Check that the accounts required by the transaction type are present."""
    if amount_minor <= 0:
        raise BusinessValidationError(
            "Amount must be greater than 0", field="amount_minor",
        )
    if transaction_type == TransactionType.INCOME and not to_account_id:
        raise BusinessValidationError(
            "Income requires a to account", field="to_account_id",
        )
    if transaction_type == TransactionType.EXPENSE and not from_account_id:
        raise BusinessValidationError(
            "Expense requires a from account", field="from_account_id",
        )
    if transaction_type == TransactionType.TRANSFER:
        if not from_account_id or not to_account_id:
            raise BusinessValidationError(
                "Transfer requires both from and to accounts",
                field="from_account_id",
            )
        if from_account_id == to_account_id:
            raise BusinessValidationError(
                "Transfer accounts must be different", field="to_account_id",
            )


def balance_effects(
    transaction_type: TransactionType | str,
    from_account_id: Hashable | None,
    to_account_id: Hashable | None,
    amount_minor: int,
) -> dict[Hashable, int]:
    """Signed per-account deltas caused by posting one transaction."""
    kind = TransactionType(transaction_type)
    effects: dict[Hashable, int] = {}
    if kind == TransactionType.INCOME and to_account_id:
        effects[to_account_id] = amount_minor
    elif kind == TransactionType.EXPENSE and from_account_id:
        effects[from_account_id] = -amount_minor
    elif kind == TransactionType.TRANSFER and from_account_id and to_account_id:
        effects[from_account_id] = -amount_minor
        effects[to_account_id] = amount_minor
    return effects


def effects_of(txn: TransactionLike) -> dict[Hashable, int]:
    return balance_effects(
        txn.transaction_type, txn.from_account_id,
        txn.to_account_id, txn.amount_minor,
    )


def reversal_effects(txn: TransactionLike) -> dict[Hashable, int]:
    """Deltas that undo effects_of(txn)."""
    return {account: -delta for account, delta in effects_of(txn).items()}


def merge_effects(effect_maps: Iterable[dict[Hashable, int]]) -> dict[Hashable, int]:
    """Sum several effect maps, dropping accounts whose net delta is 0."""
    merged: dict[Hashable, int] = defaultdict(int)
    for effects in effect_maps:
        for account, delta in effects.items():
            merged[account] += delta
    return {account: delta for account, delta in merged.items() if delta}


def recompute_balances(
    opening_balances: dict[Hashable, int],
    transactions: Iterable[TransactionLike],
) -> dict[Hashable, int]:
    """Full recompute: opening balance plus every transaction's effects."""
    balances = dict(opening_balances)
    for txn in transactions:
        for account, delta in effects_of(txn).items():
            if account in balances:
                balances[account] += delta
    return balances


def find_balance_drift(
    stored: dict[Hashable, int], expected: dict[Hashable, int],
) -> list[BalanceDrift]:
    """Accounts whose stored balance disagrees with the recomputed one."""
    return [
        BalanceDrift(account, stored[account], expected[account])
        for account in stored
        if account in expected and stored[account] != expected[account]
    ]


def is_protected_transaction(category: str | None, reference_type: str | None) -> bool:
    return (
        category == PROFIT_DISTRIBUTION_CATEGORY
        or reference_type == ReferenceType.PROFIT_SHARE.value
    )
