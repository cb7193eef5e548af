"""Core Layer - pure business rules, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, models/ or db/
    - All functions are pure and deterministic (dates are passed in, never read from the clock)

Design Decisions:
    - Functional core separated from imperative shell: services load rows,
      core decides, services write
"""
