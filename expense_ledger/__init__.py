"""Personal expense ledger: SQLite-backed store plus pure aggregation helpers."""

__version__ = "0.1.0"
