from fastapi import APIRouter, Depends

from expense_ledger.db.dal import Database
from expense_ledger.routers.deps import get_db

router = APIRouter(tags=["health"])


@router.get("/health", summary="Liveness probe with record count")
async def health(db: Database = Depends(get_db)):
    return {"status": "ok", "expenses": db.count()}
