"""Order Service - the order cascade across items, stock, payroll, profit and the ledger.

Invariants:
    - Each public method is one unit of work: it only flushes, the caller commits once,
      and any error leaves no partial writes behind
    - Worker payment records, items and stock issues of an order are always replaced together
    - Profit is distributed once, when the order is completed and fully paid
    - Deleting an order reverses every balance effect it caused before soft-deleting it
    - Customer totals are recomputed from the customer's active orders, never incremented

Design Decisions:
    - Update restocks the previous issues before re-issuing, so editing an order never
      issues its stock twice
    - A recorded distribution is final while the order exists; deleting the order is
      the way to undo it
"""

import logging
import uuid
from dataclasses import dataclass

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from shopledger.config import get_settings
from shopledger.core.domain_types import OrderId, OrderStatus, PaymentStatus
from shopledger.core.errors import (
    BusinessValidationError, ErrorContext, ResourceNotFoundError,
)
from shopledger.core.labor import build_payment_record, resolve_item_worker
from shopledger.core.money import format_currency
from shopledger.core.order_lifecycle import should_distribute_profit, validate_status_transition
from shopledger.core.order_totals import (
    compute_order_totals, default_payment_status, validate_order_amounts,
    validate_order_items,
)
from shopledger.models.customer import Customer
from shopledger.models.order import Order
from shopledger.models.order_item import OrderItem
from shopledger.models.profit_distribution import ProfitDistribution
from shopledger.models.worker import Worker
from shopledger.models.worker_payment_record import WorkerPaymentRecord
from shopledger.schemas.order import OrderCreate, OrderUpdate
from shopledger.services.inventory import InventoryService
from shopledger.services.ledger import LedgerService
from shopledger.services.numbering import SequenceAllocator
from shopledger.services.profit import ProfitDistributor

logger = logging.getLogger(__name__)


@dataclass
class OrderDetail:
    order: Order
    items: list[OrderItem]
    customer_name: str | None


class OrderService:
    """Create, update and delete orders together with everything they touch."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.numbers = SequenceAllocator(db)
        self.ledger = LedgerService(db)
        self.inventory = InventoryService(db)
        self.profit = ProfitDistributor(db, self.ledger)
        self.currency = get_settings().currency_code

    # ─── Queries ─────────────────────────────────────────────────

    async def get_order(self, order_id: OrderId) -> OrderDetail:
        order = await self._require_order(order_id)
        customer = await self.db.get(Customer, order.customer_id)
        return OrderDetail(
            order=order,
            items=await self._items_of(order.id),
            customer_name=customer.name if customer else None,
        )

    async def list_orders(
        self,
        status: OrderStatus | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[tuple[Order, str | None]]:
        """Active orders newest first, each with its customer's name."""
        query = (
            select(Order, Customer.name)
            .outerjoin(Customer, Customer.id == Order.customer_id)
            .where(Order.is_active.is_(True))
            .order_by(Order.created_at.desc())
        )
        if status:
            query = query.where(Order.status == OrderStatus(status).value)
        result = await self.db.execute(query.limit(limit).offset(offset))
        return [(order, name) for order, name in result.all()]

    # ─── Cascade ─────────────────────────────────────────────────

    async def create_order(self, data: OrderCreate) -> OrderDetail:
        customer = await self._require_customer(data.customer_id)
        totals = self._validated_totals(data)
        await self._require_workers(data)

        order = Order(
            order_number=await self.numbers.next_order_number(data.order_date.year),
            customer_id=customer.id,
            is_active=True,
        )
        self._apply_fields(order, data, totals)
        self.db.add(order)
        await self.db.flush()

        items = await self._write_items(order, data)
        await self._distribute_if_eligible(order)
        await self._refresh_customer_stats(customer.id)

        logger.info(
            f"Created order {order.order_number} with {len(items)} items, "
            f"total {format_currency(order.total_amount_minor, self.currency)}",
            extra={"order_id": order.id, "order_number": order.order_number},
        )
        return OrderDetail(order=order, items=items, customer_name=customer.name)

    async def update_order(self, order_id: OrderId, data: OrderUpdate) -> OrderDetail:
        order = await self._require_order(order_id)
        validate_status_transition(OrderStatus(order.status), OrderStatus(data.status))
        customer = await self._require_customer(data.customer_id)
        totals = self._validated_totals(data)
        await self._require_workers(data)

        previous_customer_id = order.customer_id
        await self._remove_items(order)
        self._apply_fields(order, data, totals)
        order.customer_id = customer.id
        await self.db.flush()

        items = await self._write_items(order, data)
        await self._distribute_if_eligible(order)
        await self._refresh_customer_stats(customer.id)
        if previous_customer_id != customer.id:
            await self._refresh_customer_stats(previous_customer_id)

        logger.info(
            f"Updated order {order.order_number}",
            extra={"order_id": order.id, "order_number": order.order_number},
        )
        return OrderDetail(order=order, items=items, customer_name=customer.name)

    async def delete_order(self, order_id: OrderId) -> dict:
        """Undo every effect of the order, then soft-delete it."""
        order = await self._require_order(order_id)

        transactions = await self.ledger.find_order_transactions(order.id)
        reversed_count = await self.ledger.reverse_and_delete(transactions)
        distributions = await self.db.execute(
            delete(ProfitDistribution).where(ProfitDistribution.order_id == order.id)
        )
        removed = await self._remove_items(order)

        order.is_active = False
        await self.db.flush()
        await self._refresh_customer_stats(order.customer_id)

        summary = {
            "order_id": order.id,
            "order_number": order.order_number,
            "transactions_reversed": reversed_count,
            "distributions_deleted": distributions.rowcount,
            **removed,
        }
        logger.info(
            f"Deleted order {order.order_number}: {reversed_count} transactions "
            f"reversed, {removed['units_restocked']} units restocked",
            extra={"order_id": order.id, "order_number": order.order_number},
        )
        return summary

    # ─── Helpers ─────────────────────────────────────────────────

    def _validated_totals(self, data: OrderCreate):
        validate_order_items(data.items)
        totals = compute_order_totals(
            data.items,
            shipping_cost_minor=data.shipping_cost_minor,
            other_cost_minor=data.other_cost_minor,
            paid_amount_minor=data.paid_amount_minor,
            discount_minor=data.discount_minor,
        )
        validate_order_amounts(
            totals, data.paid_amount_minor, data.allow_negative_profit,
            currency=self.currency,
        )
        return totals

    def _apply_fields(self, order: Order, data: OrderCreate, totals) -> None:
        payment_status: PaymentStatus = (
            data.payment_status or default_payment_status(data.platform)
        )
        order.order_date = data.order_date
        order.delivery_date = data.delivery_date
        order.status = OrderStatus(data.status).value
        order.platform = data.platform.value
        order.priority = data.priority.value
        order.total_amount_minor = totals.total_amount
        order.total_labor_cost_minor = totals.total_labor_cost
        order.total_material_cost_minor = totals.total_material_cost
        order.shipping_cost_minor = data.shipping_cost_minor
        order.other_cost_minor = data.other_cost_minor
        order.discount_minor = data.discount_minor
        order.paid_amount_minor = data.paid_amount_minor
        order.payment_status = payment_status.value
        order.payment_notes = data.payment_notes
        order.notes = data.notes
        order.assigned_worker_id = data.assigned_worker_id

    async def _write_items(self, order: Order, data: OrderCreate) -> list[OrderItem]:
        """Insert items, their worker payment records and stock issues."""
        items = []
        for item_in in data.items:
            item = OrderItem(
                order_id=order.id,
                product_id=item_in.product_id,
                item_name=item_in.item_name,
                description=item_in.description,
                quantity=item_in.quantity,
                unit_price_minor=item_in.unit_price_minor,
                labor_cost_minor=item_in.labor_cost_minor,
                material_cost_minor=item_in.material_cost_minor,
                assigned_worker_id=item_in.assigned_worker_id,
                is_completed=False,
            )
            self.db.add(item)
            items.append(item)
        await self.db.flush()

        for item in items:
            worker_id = resolve_item_worker(
                item.assigned_worker_id, order.assigned_worker_id,
            )
            if worker_id is None:
                continue
            self.db.add(WorkerPaymentRecord(
                order_item_id=item.id,
                **build_payment_record(worker_id, order.id, item),
            ))
        await self.db.flush()

        await self.inventory.issue_for_order(order, items)
        return items

    async def _remove_items(self, order: Order) -> dict:
        """Delete payment records and items, and restock what they issued."""
        records = await self.db.execute(
            delete(WorkerPaymentRecord).where(WorkerPaymentRecord.order_id == order.id)
        )
        restocked = await self.inventory.restock_for_order(order)
        items = await self.db.execute(
            delete(OrderItem).where(OrderItem.order_id == order.id)
        )
        await self.db.flush()
        return {
            "payment_records_deleted": records.rowcount,
            "items_deleted": items.rowcount,
            "units_restocked": restocked,
        }

    async def _distribute_if_eligible(self, order: Order) -> None:
        already = await self.profit.is_distributed(order.id)
        if should_distribute_profit(
            OrderStatus(order.status),
            order.total_amount_minor,
            order.paid_amount_minor,
            already,
        ):
            await self.profit.distribute_order_profit(order)

    async def _refresh_customer_stats(self, customer_id: uuid.UUID) -> None:
        row = (
            await self.db.execute(
                select(
                    func.count(Order.id),
                    func.coalesce(func.sum(Order.total_amount_minor), 0),
                )
                .where(Order.customer_id == customer_id)
                .where(Order.is_active.is_(True))
                .where(Order.status != OrderStatus.CANCELLED.value)
            )
        ).one()
        customer = await self.db.get(Customer, customer_id)
        if customer is None:
            return
        customer.total_spent_minor = int(row[1])
        customer.is_repeat_customer = row[0] > 1
        await self.db.flush()

    async def _items_of(self, order_id: OrderId) -> list[OrderItem]:
        result = await self.db.execute(
            select(OrderItem)
            .where(OrderItem.order_id == order_id)
            .order_by(OrderItem.created_at)
        )
        return list(result.scalars().all())

    async def _require_order(self, order_id: OrderId) -> Order:
        order = await self.db.get(Order, order_id)
        if order is None or not order.is_active:
            raise ResourceNotFoundError("Order", str(order_id))
        return order

    async def _require_customer(self, customer_id: uuid.UUID) -> Customer:
        customer = await self.db.get(Customer, customer_id)
        if customer is None:
            raise ResourceNotFoundError("Customer", str(customer_id))
        if not customer.is_active:
            raise BusinessValidationError(
                f"Customer '{customer.name}' is inactive", field="customer_id",
            )
        return customer

    async def _require_workers(self, data: OrderCreate) -> None:
        worker_ids = {data.assigned_worker_id} | {
            i.assigned_worker_id for i in data.items
        }
        for worker_id in worker_ids - {None}:
            if await self.db.get(Worker, worker_id) is None:
                raise ResourceNotFoundError(
                    "Worker", str(worker_id),
                    ErrorContext(debug_info={"field": "assigned_worker_id"}),
                )
