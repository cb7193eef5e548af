"""Services Layer - orchestration of multi-entity writes.

Invariants:
    - Services flush but never commit; the route owning the request commits once
    - A failed cascade leaves no partial writes (the session is rolled back)

Design Decisions:
    - One service class per concern, constructed per request with the request's AsyncSession
"""
