"""Shared SQLAlchemy models registry for the workspace database.

Currently includes the POS ledger models read by ``day_docket``.
"""

from .ledger import (
    Base,
    Charge,
    CombinedTillTotal,
    Customer,
    Department,
    DepartmentSales,
)

__all__ = [
    "Base",
    "Customer",
    "Charge",
    "Department",
    "DepartmentSales",
    "CombinedTillTotal",
]
