from pathlib import Path

from expense_ledger.core.config import Settings


def test_db_path_derived_from_data_dir(tmp_path):
    s = Settings(data_dir=tmp_path / "nested" / "data")
    s.init_post_load()
    assert s.db_path == tmp_path / "nested" / "data" / "expenses.db"
    assert s.db_path.parent.is_dir()


def test_env_overrides(monkeypatch, tmp_path):
    target = tmp_path / "elsewhere" / "mine.sqlite3"
    monkeypatch.setenv("DB_PATH", str(target))
    monkeypatch.setenv("DEBUG", "true")
    s = Settings()
    s.init_post_load()
    assert s.db_path == Path(target)
    assert s.debug is True
    assert target.parent.is_dir()
