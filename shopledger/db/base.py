"""SQLAlchemy Declarative Base - shared base class for all ORM models.

Invariants:
    - All models inherit from Base
    - Base is the single source of truth for table metadata

Design Decisions:
    - Separate file for Base: avoids circular imports between models
"""

from datetime import datetime, timezone

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all Shop Ledger ORM models."""
    pass


def utcnow() -> datetime:
    """Timezone-aware now, used as column default for created_at/updated_at."""
    return datetime.now(timezone.utc)
