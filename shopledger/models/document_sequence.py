"""DocumentSequence ORM - per-year counters behind order and transaction numbers.

Invariants:
    - (sequence_key, year) unique
    - last_value only grows, except when a data reset deletes the row

Design Decisions:
    - Counter row locked with SELECT ... FOR UPDATE while incremented, so two
      concurrent cascades can never draw the same number
"""

from sqlalchemy import Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from shopledger.db.base import Base


class DocumentSequence(Base):
    __tablename__ = "document_sequences"
    __table_args__ = (
        UniqueConstraint("sequence_key", "year", name="uq_document_sequence_key_year"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    sequence_key: Mapped[str] = mapped_column(String(30), nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    last_value: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
