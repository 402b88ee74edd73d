from datetime import date
import logging
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from expense_ledger.core.errors import NotFound, ValidationError
from expense_ledger.db.dal import Database
from expense_ledger.models import ExpenseIn, ExpenseOut, ExpenseRecord, FilterSelector
from expense_ledger.routers.deps import get_db
from expense_ledger.services.aggregation import filter_expenses, summarize
from expense_ledger.services.money import round2

router = APIRouter(prefix="/expenses", tags=["expenses"])
logger = logging.getLogger("expense_ledger.routers.expenses")


# Response Models ---------------------------------------------------
class SummaryOut(BaseModel):
    filter: FilterSelector
    as_of: date
    count: int
    total: float
    category_totals: Dict[str, float]
    expenses: List[ExpenseOut]


# Helpers ----------------------------------------------------------


def _selector(raw: str) -> FilterSelector:
    try:
        return FilterSelector.parse(raw)
    except ValueError as e:
        raise ValidationError(str(e), [{"field": "query.filter", "message": str(e)}]) from None


def _to_out(record: ExpenseRecord) -> ExpenseOut:
    return ExpenseOut(**record.to_dict())


def _stored(db: Database, expense_id: int) -> ExpenseOut:
    record = db.get(expense_id)
    if record is None:
        raise NotFound(expense_id)
    return _to_out(record)


# Routes -----------------------------------------------------------
@router.post("/", response_model=ExpenseOut, status_code=201, summary="Add an expense")
async def create_expense(payload: ExpenseIn, db: Database = Depends(get_db)):
    expense_id = db.add(
        amount=payload.amount,
        category=payload.category,
        note=payload.note,
        date=payload.date,
    )
    return _stored(db, expense_id)


@router.get(
    "/",
    response_model=List[ExpenseOut],
    summary="List expenses (newest first) inside a time window",
)
async def list_expenses_endpoint(
    filter: str = Query("ALL", description="ALL | WEEK | MONTH"),
    as_of: Optional[date] = Query(None, description="Reference date for WEEK/MONTH (default today)"),
    db: Database = Depends(get_db),
):
    selector = _selector(filter)
    return [_to_out(r) for r in filter_expenses(db.list(), selector, now=as_of)]


@router.get(
    "/summary",
    response_model=SummaryOut,
    summary="Total and per-category spending inside a time window",
)
async def summary_endpoint(
    filter: str = Query("ALL", description="ALL | WEEK | MONTH"),
    as_of: Optional[date] = Query(None, description="Reference date for WEEK/MONTH (default today)"),
    db: Database = Depends(get_db),
):
    result = summarize(db.list(), _selector(filter), now=as_of)
    logger.debug(
        "summary computed",
        extra={"selector": result.selector.value, "count": result.count},
    )
    # cents for display; the engine keeps exact sums
    return SummaryOut(
        filter=result.selector,
        as_of=result.as_of,
        count=result.count,
        total=round2(result.total),
        category_totals={k: round2(v) for k, v in result.category_totals.items()},
        expenses=[_to_out(r) for r in result.expenses],
    )


@router.get("/{expense_id}", response_model=ExpenseOut, summary="Fetch one expense")
async def get_expense_endpoint(expense_id: int, db: Database = Depends(get_db)):
    return _stored(db, expense_id)


@router.put(
    "/{expense_id}",
    response_model=ExpenseOut,
    summary="Replace every field of an expense except its id",
)
async def update_expense_endpoint(
    expense_id: int, payload: ExpenseIn, db: Database = Depends(get_db)
):
    db.update(
        expense_id,
        amount=payload.amount,
        category=payload.category,
        note=payload.note,
        date=payload.date,
    )
    return _stored(db, expense_id)


@router.delete("/{expense_id}", status_code=204, summary="Delete an expense (idempotent)")
async def delete_expense_endpoint(expense_id: int, db: Database = Depends(get_db)):
    db.delete(expense_id)
    return None
