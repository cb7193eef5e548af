"""Shop Ledger Application Package - orders, inventory, payroll and accounts.

Invariants:
    - Package root holds only the version constant (no import side-effects)
"""

__version__ = "1.0.0"
