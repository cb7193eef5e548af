"""Order Lifecycle - status transition rules and profit distribution eligibility.

Invariants:
    - draft < confirmed < in_progress < completed; forward moves may skip steps
    - Any status except cancelled may move to cancelled; nothing leaves cancelled
    - Backward moves raise InvalidStatusTransitionError
    - Profit is distributed only for completed, fully paid, not yet distributed orders
"""

from shopledger.core.domain_types import OrderStatus
from shopledger.core.errors import InvalidStatusTransitionError

_RANK: dict[OrderStatus, int] = {
    OrderStatus.DRAFT: 0,
    OrderStatus.CONFIRMED: 1,
    OrderStatus.IN_PROGRESS: 2,
    OrderStatus.COMPLETED: 3,
}

PENDING_STATUSES: frozenset[OrderStatus] = frozenset({
    OrderStatus.DRAFT, OrderStatus.CONFIRMED, OrderStatus.IN_PROGRESS,
})


def can_transition(current: OrderStatus, new: OrderStatus) -> bool:
    if current == new:
        return True
    if current == OrderStatus.CANCELLED:
        return False
    if new == OrderStatus.CANCELLED:
        return True
    return _RANK[new] > _RANK[current]


def validate_status_transition(current: OrderStatus, new: OrderStatus) -> None:
    """Raise InvalidStatusTransitionError when the move is not allowed."""
    if not can_transition(current, new):
        raise InvalidStatusTransitionError(current.value, new.value)


def is_pending(status: OrderStatus) -> bool:
    return status in PENDING_STATUSES


def should_distribute_profit(
    status: OrderStatus,
    total_amount_minor: int,
    paid_amount_minor: int,
    already_distributed: bool,
) -> bool:
    """Completed + nothing left to pay + not distributed before."""
    if status != OrderStatus.COMPLETED or already_distributed:
        return False
    return total_amount_minor - paid_amount_minor == 0
