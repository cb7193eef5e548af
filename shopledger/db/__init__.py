"""Database package - SQLAlchemy declarative Base.

Invariants:
    - All ORM models inherit from db.base.Base
"""
