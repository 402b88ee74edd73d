"""Domain models for the expense ledger."""

from .constants import UNCATEGORIZED, FilterSelector  # re-export
from .expense import ExpenseIn, ExpenseOut, ExpenseRecord

__all__ = [
    "UNCATEGORIZED",
    "FilterSelector",
    "ExpenseIn",
    "ExpenseOut",
    "ExpenseRecord",
]
