import functools
import logging
import sqlite3
from collections.abc import Iterable

from .db import connect
from .errors import StoreError
from .logic import normalize_sale_date
from .models import Transaction
from .query import TransactionFilter

logger = logging.getLogger(__name__)


def store_errors(message: str):
    """Re-raise sqlite3 failures from the wrapped function as StoreError."""

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except sqlite3.Error as exc:
                raise StoreError(message) from exc

        return wrapper

    return decorator


@store_errors("Error replacing transactions")
def replace_all(db_path, transactions: Iterable[Transaction]) -> int:
    rows = []
    for txn in transactions:
        date_of_sale, sale_month = normalize_sale_date(txn.date_of_sale)
        rows.append(
            (
                txn.id,
                txn.title,
                txn.description,
                txn.price,
                txn.category,
                int(txn.sold),
                date_of_sale,
                sale_month,
                txn.image,
            )
        )
    with connect(db_path) as conn:
        conn.execute("DELETE FROM transactions")
        conn.executemany(
            """
            INSERT INTO transactions(
              id, title, description, price, category, sold, date_of_sale, sale_month, image
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            rows,
        )
    logger.info("Replaced transactions with %d records", len(rows))
    return len(rows)


@store_errors("Error counting transactions")
def count_txns(db_path, flt: TransactionFilter) -> int:
    where, params = flt.to_sql()
    with connect(db_path) as conn:
        row = conn.execute(
            f"SELECT COUNT(*) AS c FROM transactions WHERE {where}",
            params,
        ).fetchone()
    return int(row["c"])


@store_errors("Error fetching transactions")
def list_txns(
    db_path, flt: TransactionFilter, *, limit: int = -1, offset: int = 0
) -> list[Transaction]:
    where, params = flt.to_sql()
    with connect(db_path) as conn:
        cur = conn.execute(
            f"""
            SELECT * FROM transactions
            WHERE {where}
            ORDER BY row_id ASC
            LIMIT ? OFFSET ?
            """,
            (*params, limit, offset),
        )
        return [Transaction.from_row(row) for row in cur.fetchall()]
