from fastapi import Request

from expense_ledger.db.dal import Database


def get_db(request: Request) -> Database:
    """Return the store opened once by ``create_app``."""
    return request.app.state.db
