"""Service module exports."""

from . import debt_classification, debt_manager, debts, export_csv, import_csv

__all__ = [
    "debt_classification",
    "debt_manager",
    "debts",
    "export_csv",
    "import_csv",
]
