from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from expense_ledger.models.constants import (
    DATE_FORMAT,
    UNCATEGORIZED,
    WEEK_WINDOW_DAYS,
    FilterSelector,
)
from expense_ledger.models.expense import ExpenseRecord
from expense_ledger.services.money import parse_amount, sum_amounts

"""Query & aggregation over a snapshot of ledger records.

Scopes implemented:
    - Time window filtering (ALL / WEEK / MONTH)
    - Total spending
    - Per-category totals
    - Combined summary (filtered rows + both totals)

Design notes:
    Every function is pure: it takes the record list (as returned by
    ``Database.list``) plus the selector and returns fresh values. Malformed
    stored values never raise; bad dates drop out of time windows and bad
    amounts count as zero. Totals are not rounded.

    "now" is read once per call. Pass ``now`` explicitly for reproducible
    results.
"""

Now = Union[date, datetime, None]


def _as_of(now: Now) -> date:
    if now is None:
        return date.today()
    if isinstance(now, datetime):
        return now.date()
    return now


def parse_record_date(value: Any) -> Optional[date]:
    """Return the calendar date of a stored ``YYYY-MM-DD`` value, or None."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    try:
        return datetime.strptime(value.strip(), DATE_FORMAT).date()
    except ValueError:
        return None


def _category_label(category: Any) -> str:
    # only absent or empty labels are substituted; text is grouped verbatim
    if isinstance(category, str) and category:
        return category
    return UNCATEGORIZED


def matches(record: ExpenseRecord, selector: FilterSelector, as_of: date) -> bool:
    if selector is FilterSelector.ALL:
        return True
    d = parse_record_date(record.date)
    if d is None:
        return False
    if selector is FilterSelector.WEEK:
        days_back = (as_of - d).days
        # future dates give a negative difference
        return 0 <= days_back < WEEK_WINDOW_DAYS
    return d.year == as_of.year and d.month == as_of.month


def filter_expenses(
    records: Iterable[ExpenseRecord],
    selector: Union[FilterSelector, str] = FilterSelector.ALL,
    now: Now = None,
) -> List[ExpenseRecord]:
    """Return the records inside the selector's window, input order preserved."""
    selector = FilterSelector.parse(selector)
    as_of = _as_of(now)
    return [r for r in records if matches(r, selector, as_of)]


def total_spending(records: Iterable[ExpenseRecord]) -> float:
    return sum_amounts(parse_amount(r.amount) for r in records)


def category_totals(records: Iterable[ExpenseRecord]) -> Dict[str, float]:
    """Sum amounts per category in order of first appearance.

    Missing or empty categories are grouped under ``UNCATEGORIZED``. Totals
    are exact sums; round for display only.
    """
    sums: Dict[str, List[float]] = {}
    for r in records:
        sums.setdefault(_category_label(r.category), []).append(parse_amount(r.amount))
    return {label: sum_amounts(values) for label, values in sums.items()}


@dataclass(frozen=True)
class LedgerSummary:
    selector: FilterSelector
    as_of: date
    expenses: Tuple[ExpenseRecord, ...]
    total: float
    category_totals: Dict[str, float] = field(default_factory=dict)

    @property
    def count(self) -> int:
        return len(self.expenses)


def summarize(
    records: Iterable[ExpenseRecord],
    selector: Union[FilterSelector, str] = FilterSelector.ALL,
    now: Now = None,
) -> LedgerSummary:
    """Filter once and compute both totals over the same window."""
    selector = FilterSelector.parse(selector)
    as_of = _as_of(now)
    selected = tuple(filter_expenses(records, selector, as_of))
    return LedgerSummary(
        selector=selector,
        as_of=as_of,
        expenses=selected,
        total=total_spending(selected),
        category_totals=category_totals(selected),
    )
