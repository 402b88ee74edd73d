"""Data Access Layer for the expense ledger.

Responsibilities
----------------
- Own the single SQLite connection, opened by ``initialize`` and held until
  ``close``.
- Validate caller input before any write; a rejected call writes nothing.
- Run every mutation in one transaction so readers never see a partial row.
- Hand out immutable ``ExpenseRecord`` snapshots, newest first.

Aggregation lives in ``expense_ledger.services.aggregation`` and never
touches this class.
"""

from __future__ import annotations

from contextlib import contextmanager
import logging
from pathlib import Path
import sqlite3
import threading
from typing import Any, Dict, Iterator, List, Optional, Union

import pydantic

from expense_ledger.core.errors import NotFound, StorageUnavailable, ValidationError
from expense_ledger.models import ExpenseIn, ExpenseRecord

from .schema import EXPENSE_COLUMNS, ensure_schema

logger = logging.getLogger("expense_ledger.db")

_SELECT_COLUMNS = ", ".join(EXPENSE_COLUMNS)


def _validation_error(exc: pydantic.ValidationError) -> ValidationError:
    errors: List[Dict[str, str]] = []
    for err in exc.errors():
        field = ".".join(str(p) for p in err.get("loc", ())) or "expense"
        msg = err.get("msg", "invalid value")
        # pydantic prefixes messages raised from our validators
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        errors.append({"field": field, "message": msg})
    summary = "; ".join(f"{e['field']}: {e['message']}" for e in errors)
    return ValidationError(summary or "invalid expense", errors)


class Database:
    def __init__(self, db_path: Union[Path, str]):
        self.db_path = db_path
        self._conn: Optional[sqlite3.Connection] = None
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Connection helpers
    def initialize(self) -> None:
        """Open the store and create the schema if missing.

        Safe to call on every startup; a second call reuses the open
        connection and leaves existing rows untouched.
        """
        with self._lock:
            conn = self._conn
            opened = False
            try:
                if conn is None:
                    conn = sqlite3.connect(self.db_path, check_same_thread=False)
                    conn.row_factory = sqlite3.Row
                    opened = True
                with conn:
                    ensure_schema(conn)
            except sqlite3.Error as e:
                if opened and conn is not None:
                    conn.close()
                logger.error(
                    "cannot open ledger storage: %s", e, extra={"db_path": self.db_path}
                )
                raise StorageUnavailable(
                    f"cannot open ledger storage at {self.db_path}: {e}"
                ) from e
            self._conn = conn
        logger.info("ledger storage ready", extra={"db_path": self.db_path})

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        with self._lock:
            if self._conn is None:
                raise StorageUnavailable("ledger storage is not initialized")
            yield self._conn

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Cursor]:
        """Yield a cursor inside a transaction committed (or rolled back) as a unit."""
        with self._connection() as conn:
            with conn:
                yield conn.cursor()

    @staticmethod
    def _validate(amount: Any, category: Any, note: Any, date: Any) -> ExpenseIn:
        try:
            return ExpenseIn(amount=amount, category=category, note=note, date=date)
        except pydantic.ValidationError as e:
            err = _validation_error(e)
            logger.warning("rejected expense input: %s", err)
            raise err from None

    # ------------------------------------------------------------------
    # Reads
    def list(self) -> List[ExpenseRecord]:
        """Return every record, most recently created first."""
        with self._connection() as conn:
            cur = conn.execute(
                f"SELECT {_SELECT_COLUMNS} FROM expenses ORDER BY id DESC"
            )
            return [ExpenseRecord.from_row(r) for r in cur.fetchall()]

    def get(self, expense_id: int) -> Optional[ExpenseRecord]:
        with self._connection() as conn:
            cur = conn.execute(
                f"SELECT {_SELECT_COLUMNS} FROM expenses WHERE id = ?", (expense_id,)
            )
            row = cur.fetchone()
            return ExpenseRecord.from_row(row) if row else None

    def count(self) -> int:
        with self._connection() as conn:
            row = conn.execute("SELECT COUNT(*) FROM expenses").fetchone()
            return int(row[0] if row and row[0] is not None else 0)

    # ------------------------------------------------------------------
    # Mutations
    def add(
        self,
        amount: Any,
        category: Any,
        note: Optional[str] = None,
        date: Any = None,
    ) -> int:
        expense = self._validate(amount, category, note, date)
        with self._transaction() as cur:
            cur.execute(
                "INSERT INTO expenses (amount, category, note, date) VALUES (?, ?, ?, ?)",
                (
                    expense.amount,
                    expense.category,
                    expense.note,
                    expense.date.isoformat(),
                ),
            )
            expense_id = int(cur.lastrowid)
        logger.debug("expense added", extra={"expense_id": expense_id})
        return expense_id

    def update(
        self,
        expense_id: int,
        amount: Any,
        category: Any,
        note: Optional[str] = None,
        date: Any = None,
    ) -> None:
        """Replace every field but ``id``; partial updates are not supported."""
        expense = self._validate(amount, category, note, date)
        with self._transaction() as cur:
            cur.execute(
                """
                UPDATE expenses
                SET amount = ?, category = ?, note = ?, date = ?
                WHERE id = ?
                """,
                (
                    expense.amount,
                    expense.category,
                    expense.note,
                    expense.date.isoformat(),
                    expense_id,
                ),
            )
            if cur.rowcount == 0:
                raise NotFound(expense_id)
        logger.debug("expense updated", extra={"expense_id": expense_id})

    def delete(self, expense_id: int) -> None:
        """Remove the record if present. Deleting a missing id is a no-op."""
        with self._transaction() as cur:
            cur.execute("DELETE FROM expenses WHERE id = ?", (expense_id,))
            removed = cur.rowcount
        logger.debug(
            "expense deleted" if removed else "delete of missing expense ignored",
            extra={"expense_id": expense_id},
        )
