import sqlite3
from pathlib import Path

from .settings import Settings


def _contains_ci(haystack: str | None, needle: str | None) -> int:
    if haystack is None or needle is None:
        return 0
    return int(needle.casefold() in haystack.casefold())


def connect(db_path: str | Path):
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    # SQLite's LIKE and lower() only fold ASCII.
    conn.create_function("contains_ci", 2, _contains_ci, deterministic=True)
    return conn


def init_db(settings: Settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    Path(settings.db_path).parent.mkdir(parents=True, exist_ok=True)
    with connect(settings.db_path) as conn:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS transactions (
              row_id INTEGER PRIMARY KEY AUTOINCREMENT,
              id INTEGER NOT NULL,
              title TEXT NOT NULL,
              description TEXT NOT NULL,
              price REAL NOT NULL,
              category TEXT NOT NULL,
              sold INTEGER NOT NULL CHECK(sold IN (0, 1)),
              date_of_sale TEXT NOT NULL,
              sale_month INTEGER NOT NULL CHECK(sale_month BETWEEN 1 AND 12),
              image TEXT NOT NULL
            );
            """
        )
        conn.execute(
            """
            CREATE INDEX IF NOT EXISTS idx_transactions_month
            ON transactions(sale_month, row_id)
            """
        )
