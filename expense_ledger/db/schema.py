"""Database schema DDL for the ledger.

Tables:
  - expenses: one row per recorded expense; ``id`` is assigned by SQLite and,
    thanks to AUTOINCREMENT, never reissued after a delete.
"""

from __future__ import annotations
import sqlite3
from typing import Sequence

EXPENSES_DDL = """
CREATE TABLE IF NOT EXISTS expenses (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    amount REAL NOT NULL,
    category TEXT NOT NULL,
    note TEXT,
    date TEXT NOT NULL -- ISO date (YYYY-MM-DD)
);
"""

EXPENSE_COLUMNS: Sequence[str] = ("id", "amount", "category", "note", "date")

DDL_ORDER: Sequence[str] = (EXPENSES_DDL,)


def ensure_schema(conn: sqlite3.Connection) -> None:
    """Create all tables idempotently on an open connection.

    The caller owns the transaction; nothing here commits.
    """
    cur = conn.cursor()
    for ddl in DDL_ORDER:
        cur.execute(ddl)
