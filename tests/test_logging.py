import io
import json
import logging

from expense_ledger.core.logging import init_logging, request_id_ctx
from expense_ledger.db.dal import Database


def _lines(stream: io.StringIO):
    return [json.loads(line) for line in stream.getvalue().splitlines() if line.strip()]


def test_store_logs_json_lines_with_context(tmp_path):
    stream = io.StringIO()
    init_logging(debug=True, stream=stream)
    try:
        db = Database(tmp_path / "log.sqlite3")
        db.initialize()
        token = request_id_ctx.set("req-1")
        try:
            expense_id = db.add(3, "Food", None, "2024-03-04")
        finally:
            request_id_ctx.reset(token)
        db.close()
    finally:
        logging.getLogger().handlers.clear()

    records = _lines(stream)
    ready = next(r for r in records if r["message"] == "ledger storage ready")
    assert ready["level"] == "INFO"
    assert ready["request_id"] == "-"
    assert ready["db_path"].endswith("log.sqlite3")

    added = next(r for r in records if r["message"] == "expense added")
    assert added["logger"] == "expense_ledger.db"
    assert added["request_id"] == "req-1"
    assert added["expense_id"] == str(expense_id)


def test_rejected_input_logged_as_warning(tmp_path):
    stream = io.StringIO()
    init_logging(debug=False, stream=stream)
    db = Database(tmp_path / "warn.sqlite3")
    db.initialize()
    try:
        try:
            db.add(-1, "Food", None, "2024-03-04")
        except ValueError:
            pass
    finally:
        db.close()
        logging.getLogger().handlers.clear()

    warnings = [r for r in _lines(stream) if r["level"] == "WARNING"]
    assert warnings and warnings[0]["message"].startswith("rejected expense input: amount")


def test_summary_route_logs_selector_and_count(tmp_path, capsys):
    from fastapi.testclient import TestClient

    from expense_ledger.core.config import Settings
    from expense_ledger.main import create_app

    settings = Settings(db_path=tmp_path / "api.sqlite3", debug=True)
    try:
        with TestClient(create_app(settings_override=settings)) as client:
            client.post("/expenses/", json={"amount": 2, "category": "Food", "date": "2024-03-09"})
            client.get("/expenses/summary", params={"filter": "week", "as_of": "2024-03-10"})
    finally:
        logging.getLogger().handlers.clear()

    lines = [json.loads(line) for line in capsys.readouterr().out.splitlines() if line.startswith("{")]
    summary = next(r for r in lines if r["message"] == "summary computed")
    assert summary["selector"] == "WEEK"
    assert summary["count"] == "1"
