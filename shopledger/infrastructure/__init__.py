"""Infrastructure Layer - database engine and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from core/ business rules (errors excepted)
    - Database failures are mapped to DatabaseError before leaving this layer
"""
