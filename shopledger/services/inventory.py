"""Inventory Service - stock issues for orders, their reversal, manual adjustments and batches.

Invariants:
    - Every stock change writes a StockMovement in the same transaction
    - Stock may go negative on order issue; that is logged, not refused
    - restock_for_order restores only what is still net-issued for the order,
      so calling it twice never restores twice
    - InventoryBatch.total_labor_cost_minor is always quantity × per-item cost

Design Decisions:
    - Catalog items with no inventory row are skipped: custom and untracked
      products never block an order
    - Stock applied with relative UPDATEs, same as account balances
"""

import logging
import uuid
from collections import defaultdict
from typing import Iterable

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from shopledger.core.domain_types import MovementType, ProductId, ReferenceType
from shopledger.core.errors import BusinessValidationError, ResourceNotFoundError
from shopledger.models.inventory import Inventory
from shopledger.models.inventory_batch import InventoryBatch
from shopledger.models.order import Order
from shopledger.models.order_item import OrderItem
from shopledger.models.product import Product
from shopledger.models.stock_movement import StockMovement
from shopledger.models.warehouse import Warehouse

logger = logging.getLogger(__name__)

DEFAULT_WAREHOUSE_NAME = "Main Warehouse"


class InventoryService:
    """Stock levels, movements and production batches."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Order Cascade ───────────────────────────────────────────

    async def issue_for_order(self, order: Order, items: Iterable[OrderItem]) -> int:
        """Reduce stock for each catalog item of the order. Returns movements written."""
        written = 0
        for item in items:
            if item.product_id is None:
                continue
            row = await self._first_inventory_row(item.product_id)
            if row is None:
                logger.debug(
                    f"No inventory row for '{item.item_name}', stock not tracked",
                    extra={"order_id": order.id, "product_id": item.product_id},
                )
                continue
            if row.stock_quantity - item.quantity < 0:
                logger.warning(
                    f"Inventory for '{item.item_name}' goes negative: "
                    f"on hand {row.stock_quantity}, ordered {item.quantity}",
                    extra={"order_id": order.id, "product_id": item.product_id},
                )
            await self._shift_stock(row.id, -item.quantity)
            self.db.add(StockMovement(
                product_id=item.product_id,
                warehouse_id=row.warehouse_id,
                movement_type=MovementType.ISSUE.value,
                quantity=item.quantity,
                unit_cost_minor=row.average_cost_minor,
                reference_type=ReferenceType.ORDER.value,
                reference_id=order.id,
                notes=f"Order {order.order_number} - {item.item_name}",
            ))
            written += 1
        await self.db.flush()
        return written

    async def restock_for_order(self, order: Order) -> int:
        """Put back whatever is still net-issued to the order."""
        result = await self.db.execute(
            select(StockMovement).where(StockMovement.reference_id == order.id)
        )
        outstanding: dict[tuple[uuid.UUID, uuid.UUID], int] = defaultdict(int)
        unit_costs: dict[tuple[uuid.UUID, uuid.UUID], int] = {}
        for mv in result.scalars():
            key = (mv.product_id, mv.warehouse_id)
            if (mv.movement_type == MovementType.ISSUE.value
                    and mv.reference_type == ReferenceType.ORDER.value):
                outstanding[key] += mv.quantity
                unit_costs[key] = mv.unit_cost_minor
            elif (mv.movement_type == MovementType.RECEIPT.value
                    and mv.reference_type == ReferenceType.ORDER_REVERSAL.value):
                outstanding[key] -= mv.quantity

        restored = 0
        for (product_id, warehouse_id), quantity in outstanding.items():
            if quantity <= 0:
                continue
            await self.db.execute(
                update(Inventory)
                .where(Inventory.product_id == product_id)
                .where(Inventory.warehouse_id == warehouse_id)
                .values(stock_quantity=Inventory.stock_quantity + quantity)
            )
            self.db.add(StockMovement(
                product_id=product_id,
                warehouse_id=warehouse_id,
                movement_type=MovementType.RECEIPT.value,
                quantity=quantity,
                unit_cost_minor=unit_costs.get((product_id, warehouse_id), 0),
                reference_type=ReferenceType.ORDER_REVERSAL.value,
                reference_id=order.id,
                notes=f"Reversal of order {order.order_number}",
            ))
            restored += quantity
        await self.db.flush()
        if restored:
            logger.info(
                f"Restocked {restored} units from order {order.order_number}",
                extra={"order_id": order.id},
            )
        return restored

    # ─── Manual Stock ────────────────────────────────────────────

    async def adjust_stock(
        self,
        product_id: ProductId,
        quantity_delta: int,
        movement_type: MovementType = MovementType.ADJUSTMENT,
        warehouse_id: uuid.UUID | None = None,
        unit_cost_minor: int | None = None,
        notes: str | None = None,
    ) -> Inventory:
        """Receive, issue or adjust stock by hand; creates the inventory row if needed."""
        movement_type = MovementType(movement_type)
        if quantity_delta == 0:
            raise BusinessValidationError(
                "Quantity change cannot be 0", field="quantity_delta",
            )
        if movement_type == MovementType.RECEIPT and quantity_delta < 0:
            raise BusinessValidationError(
                "Receipts must add stock", field="quantity_delta",
            )
        if movement_type == MovementType.ISSUE and quantity_delta > 0:
            raise BusinessValidationError(
                "Issues must remove stock", field="quantity_delta",
            )
        if movement_type == MovementType.TRANSFER:
            raise BusinessValidationError(
                "Transfers are not supported as manual adjustments",
                field="movement_type",
            )
        await self._require_product(product_id)
        warehouse = (
            await self._require_warehouse(warehouse_id)
            if warehouse_id else await self.default_warehouse()
        )

        row = (
            await self.db.execute(
                select(Inventory)
                .where(Inventory.product_id == product_id)
                .where(Inventory.warehouse_id == warehouse.id)
            )
        ).scalar_one_or_none()
        if row is None:
            row = Inventory(
                product_id=product_id, warehouse_id=warehouse.id,
                stock_quantity=0, average_cost_minor=unit_cost_minor or 0,
            )
            self.db.add(row)
            await self.db.flush()
        elif unit_cost_minor is not None and movement_type == MovementType.RECEIPT:
            row.average_cost_minor = _weighted_average(
                row.stock_quantity, row.average_cost_minor,
                quantity_delta, unit_cost_minor,
            )

        await self._shift_stock(row.id, quantity_delta)
        self.db.add(StockMovement(
            product_id=product_id,
            warehouse_id=warehouse.id,
            movement_type=movement_type.value,
            quantity=(
                quantity_delta if movement_type == MovementType.ADJUSTMENT
                else abs(quantity_delta)
            ),
            unit_cost_minor=(
                unit_cost_minor if unit_cost_minor is not None
                else row.average_cost_minor
            ),
            reference_type=ReferenceType.MANUAL.value,
            notes=notes,
        ))
        await self.db.flush()
        await self.db.refresh(row)
        return row

    async def default_warehouse(self) -> Warehouse:
        """First active warehouse, created on first use."""
        warehouse = (
            await self.db.execute(
                select(Warehouse)
                .where(Warehouse.is_active.is_(True))
                .order_by(Warehouse.created_at)
                .limit(1)
            )
        ).scalar_one_or_none()
        if warehouse is None:
            warehouse = Warehouse(name=DEFAULT_WAREHOUSE_NAME)
            self.db.add(warehouse)
            await self.db.flush()
            logger.info(f"Created default warehouse '{DEFAULT_WAREHOUSE_NAME}'")
        return warehouse

    async def list_inventory(self) -> list[dict]:
        result = await self.db.execute(
            select(Inventory, Product.name, Warehouse.name)
            .join(Product, Product.id == Inventory.product_id)
            .join(Warehouse, Warehouse.id == Inventory.warehouse_id)
            .order_by(Product.name)
        )
        return [
            {
                "id": inv.id,
                "product_id": inv.product_id,
                "product_name": product_name,
                "warehouse_id": inv.warehouse_id,
                "warehouse_name": warehouse_name,
                "stock_quantity": inv.stock_quantity,
                "average_cost_minor": inv.average_cost_minor,
                "minimum_stock_level": inv.minimum_stock_level,
                "is_low_stock": inv.stock_quantity <= inv.minimum_stock_level,
            }
            for inv, product_name, warehouse_name in result.all()
        ]

    async def list_movements(
        self, product_id: ProductId | None = None, limit: int = 100,
    ) -> list[StockMovement]:
        query = select(StockMovement).order_by(StockMovement.movement_date.desc())
        if product_id:
            query = query.where(StockMovement.product_id == product_id)
        result = await self.db.execute(query.limit(limit))
        return list(result.scalars().all())

    # ─── Batches ─────────────────────────────────────────────────

    async def list_batches(self) -> list[tuple[InventoryBatch, str]]:
        """Batches newest first, each with its product name."""
        result = await self.db.execute(
            select(InventoryBatch, func.coalesce(Product.name, "Unknown Product"))
            .outerjoin(Product, Product.id == InventoryBatch.product_id)
            .order_by(InventoryBatch.created_at.desc())
        )
        return [(batch, name) for batch, name in result.all()]

    async def create_batch(
        self,
        product_id: ProductId,
        quantity: int,
        labor_cost_per_item_minor: int,
        notes: str | None = None,
    ) -> InventoryBatch:
        _validate_batch(quantity, labor_cost_per_item_minor)
        await self._require_product(product_id)
        batch = InventoryBatch(
            product_id=product_id,
            quantity=quantity,
            labor_cost_per_item_minor=labor_cost_per_item_minor,
            total_labor_cost_minor=quantity * labor_cost_per_item_minor,
            notes=notes,
        )
        self.db.add(batch)
        await self.db.flush()
        return batch

    async def update_batch(
        self,
        batch_id: uuid.UUID,
        product_id: ProductId,
        quantity: int,
        labor_cost_per_item_minor: int,
        notes: str | None = None,
    ) -> InventoryBatch:
        _validate_batch(quantity, labor_cost_per_item_minor)
        batch = await self.get_batch(batch_id)
        await self._require_product(product_id)
        batch.product_id = product_id
        batch.quantity = quantity
        batch.labor_cost_per_item_minor = labor_cost_per_item_minor
        batch.total_labor_cost_minor = quantity * labor_cost_per_item_minor
        batch.notes = notes
        await self.db.flush()
        return batch

    async def delete_batch(self, batch_id: uuid.UUID) -> None:
        batch = await self.get_batch(batch_id)
        await self.db.delete(batch)
        await self.db.flush()

    async def get_batch(self, batch_id: uuid.UUID) -> InventoryBatch:
        batch = await self.db.get(InventoryBatch, batch_id)
        if batch is None:
            raise ResourceNotFoundError("InventoryBatch", str(batch_id))
        return batch

    # ─── Helpers ─────────────────────────────────────────────────

    async def _first_inventory_row(self, product_id: ProductId) -> Inventory | None:
        result = await self.db.execute(
            select(Inventory)
            .where(Inventory.product_id == product_id)
            .order_by(Inventory.created_at)
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def _shift_stock(self, inventory_id: uuid.UUID, delta: int) -> None:
        await self.db.execute(
            update(Inventory)
            .where(Inventory.id == inventory_id)
            .values(stock_quantity=Inventory.stock_quantity + delta)
        )

    async def _require_product(self, product_id: ProductId) -> Product:
        product = await self.db.get(Product, product_id)
        if product is None:
            raise ResourceNotFoundError("Product", str(product_id))
        return product

    async def _require_warehouse(self, warehouse_id: uuid.UUID) -> Warehouse:
        warehouse = await self.db.get(Warehouse, warehouse_id)
        if warehouse is None:
            raise ResourceNotFoundError("Warehouse", str(warehouse_id))
        return warehouse


def _validate_batch(quantity: int, labor_cost_per_item_minor: int) -> None:
    if quantity <= 0:
        raise BusinessValidationError(
            "Quantity must be greater than 0", field="quantity",
        )
    if labor_cost_per_item_minor < 0:
        raise BusinessValidationError(
            "Labor cost cannot be negative", field="labor_cost_per_item_minor",
        )


def _weighted_average(
    on_hand: int, current_cost: int, received: int, received_cost: int,
) -> int:
    """Moving average unit cost after a receipt; on-hand below 0 counts as 0."""
    on_hand = max(on_hand, 0)
    total_qty = on_hand + received
    if total_qty <= 0:
        return received_cost
    return round((on_hand * current_cost + received * received_cost) / total_qty)
