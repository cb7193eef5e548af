"""Sequence Allocator - gap-free per-year document numbers drawn inside the caller's transaction.

Invariants:
    - Each (sequence_key, year) counter row is locked (SELECT ... FOR UPDATE) while incremented
    - The row is created with INSERT ... ON CONFLICT DO NOTHING before it is locked, so two
      first-of-year cascades both end up waiting on the same row instead of one failing
    - A new counter starts after the highest number already issued for that year
      (0 when none, e.g. right after a reset deleted the orders)
    - A number is only consumed if the surrounding transaction commits

Design Decisions:
    - Counter table over MAX(order_number) + 1 on every call: no race between
      concurrent cascades and no random-suffix fallback when a number collides
    - Prefixes come from Settings so deployments can rebrand numbering
    - Insert-if-absent uses the PostgreSQL and SQLite dialect inserts
"""

import logging

from sqlalchemy import delete, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from shopledger.config import get_settings
from shopledger.core.numbering import (
    ORDER_SEQUENCE_KEY, TRANSACTION_SEQUENCE_KEY, format_document_number,
    next_sequence, parse_sequence,
)
from shopledger.models.document_sequence import DocumentSequence
from shopledger.models.order import Order
from shopledger.models.transaction import Transaction

logger = logging.getLogger(__name__)

_DIALECT_INSERTS = {"postgresql": postgresql.insert, "sqlite": sqlite.insert}


class SequenceAllocator:
    """Allocates order and transaction numbers from DocumentSequence rows."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.settings = get_settings()
        self._issued = {
            ORDER_SEQUENCE_KEY: (Order.order_number, self.settings.order_number_prefix),
            TRANSACTION_SEQUENCE_KEY: (
                Transaction.transaction_number, self.settings.transaction_number_prefix,
            ),
        }

    async def next_value(self, sequence_key: str, year: int) -> int:
        """Increment and return the counter for (sequence_key, year)."""
        counter = await self._locked_counter(sequence_key, year)
        if counter is None:
            await self._create_counter(sequence_key, year)
            counter = await self._locked_counter(sequence_key, year)
        counter.last_value += 1
        await self.db.flush()
        return counter.last_value

    async def next_order_number(self, year: int) -> str:
        value = await self.next_value(ORDER_SEQUENCE_KEY, year)
        return format_document_number(self.settings.order_number_prefix, year, value)

    async def next_transaction_number(self, year: int) -> str:
        value = await self.next_value(TRANSACTION_SEQUENCE_KEY, year)
        return format_document_number(
            self.settings.transaction_number_prefix, year, value,
        )

    async def reset_sequence(self, sequence_key: str, year: int | None = None) -> int:
        """Delete counter(s) for sequence_key; returns how many were removed."""
        stmt = delete(DocumentSequence).where(
            DocumentSequence.sequence_key == sequence_key,
        )
        if year is not None:
            stmt = stmt.where(DocumentSequence.year == year)
        result = await self.db.execute(stmt)
        logger.info(
            f"Reset {sequence_key} numbering ({result.rowcount} counters)",
        )
        return result.rowcount

    async def _locked_counter(self, sequence_key: str, year: int) -> DocumentSequence | None:
        result = await self.db.execute(
            select(DocumentSequence)
            .where(DocumentSequence.sequence_key == sequence_key)
            .where(DocumentSequence.year == year)
            .with_for_update()
        )
        return result.scalar_one_or_none()

    async def _create_counter(self, sequence_key: str, year: int) -> None:
        insert = _DIALECT_INSERTS[self.db.get_bind().dialect.name]
        await self.db.execute(
            insert(DocumentSequence)
            .values(
                sequence_key=sequence_key,
                year=year,
                last_value=await self._last_issued(sequence_key, year),
            )
            .on_conflict_do_nothing(index_elements=["sequence_key", "year"])
        )

    async def _last_issued(self, sequence_key: str, year: int) -> int:
        """Highest sequence already used in (sequence_key, year), 0 if none."""
        column, prefix = self._issued[sequence_key]
        numbers = (
            await self.db.execute(select(column).where(column.like(f"{prefix}-{year}-%")))
        ).scalars().all()
        last = max(numbers, key=lambda n: parse_sequence(n, prefix, year) or 0, default=None)
        return next_sequence(last, prefix, year) - 1
