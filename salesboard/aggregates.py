"""Month-level aggregations behind the statistics and chart endpoints.

Callers pass a month-only filter; search terms narrow the table view but never
the aggregates.
"""

from .db import connect
from .query import TransactionFilter
from .repo import store_errors

# (inclusive upper bound, label); anything above the last bound is "901 - above".
PRICE_BUCKETS = (
    (100, "0 - 100"),
    (200, "101 - 200"),
    (300, "201 - 300"),
    (400, "301 - 400"),
    (500, "401 - 500"),
    (600, "501 - 600"),
    (700, "601 - 700"),
    (800, "701 - 800"),
    (900, "801 - 900"),
)
TOP_BUCKET_LABEL = "901 - above"


def _bucket_case() -> tuple[str, tuple]:
    branches = " ".join("WHEN price <= ? THEN ?" for _ in PRICE_BUCKETS)
    params = tuple(value for bucket in PRICE_BUCKETS for value in bucket)
    return f"CASE {branches} ELSE ? END", (*params, TOP_BUCKET_LABEL)


@store_errors("Error fetching statistics")
def get_statistics(db_path, flt: TransactionFilter) -> dict:
    where, params = flt.to_sql()
    with connect(db_path) as conn:
        totals = conn.execute(
            f"""
            SELECT
              COALESCE(SUM(price), 0) AS total_sale_amount,
              COALESCE(SUM(CASE WHEN sold = 1 THEN 1 ELSE 0 END), 0) AS sold_items,
              COALESCE(SUM(CASE WHEN sold = 0 THEN 1 ELSE 0 END), 0) AS not_sold_items
            FROM transactions
            WHERE {where}
            """,
            params,
        ).fetchone()

    return {
        "totalSaleAmount": float(totals["total_sale_amount"]),
        "totalSoldItems": int(totals["sold_items"]),
        "totalNotSoldItems": int(totals["not_sold_items"]),
    }


@store_errors("Error fetching bar chart data")
def get_price_histogram(db_path, flt: TransactionFilter) -> list[dict]:
    where, params = flt.to_sql()
    case_sql, case_params = _bucket_case()
    with connect(db_path) as conn:
        rows = conn.execute(
            f"""
            SELECT {case_sql} AS bucket, COUNT(*) AS count
            FROM transactions
            WHERE {where}
            GROUP BY bucket
            ORDER BY bucket ASC
            """,
            (*case_params, *params),
        ).fetchall()
    return [{"_id": row["bucket"], "count": int(row["count"])} for row in rows]


@store_errors("Error fetching pie chart data")
def get_category_histogram(db_path, flt: TransactionFilter) -> list[dict]:
    where, params = flt.to_sql()
    with connect(db_path) as conn:
        rows = conn.execute(
            f"""
            SELECT category, COUNT(*) AS count
            FROM transactions
            WHERE {where}
            GROUP BY category
            ORDER BY category ASC
            """,
            params,
        ).fetchall()
    return [{"_id": row["category"], "count": int(row["count"])} for row in rows]
