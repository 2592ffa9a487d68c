import asyncio
import logging

from .aggregates import get_category_histogram, get_price_histogram, get_statistics
from .errors import CompositionError
from .query import TransactionFilter, build_filter
from .repo import count_txns, list_txns

logger = logging.getLogger(__name__)

DEFAULT_PER_PAGE = 10


def get_page(
    db_path, flt: TransactionFilter, *, page: int = 1, per_page: int = DEFAULT_PER_PAGE
) -> dict:
    if page < 1:
        raise ValueError("page must be at least 1")
    if per_page < 1:
        raise ValueError("perPage must be at least 1")
    total = count_txns(db_path, flt)
    offset = (page - 1) * per_page
    if offset >= total:
        transactions = []
    else:
        # both bounds stay within SQLite's 64-bit integers
        transactions = list_txns(
            db_path, flt, limit=min(per_page, total - offset), offset=offset
        )
    return {
        "transactions": [txn.to_dict() for txn in transactions],
        "total": total,
        "page": page,
        "totalPages": -(-total // per_page),
    }


async def get_combined(
    db_path,
    *,
    month: str | None,
    search: str | None = None,
    page: int = 1,
    per_page: int = DEFAULT_PER_PAGE,
    timeout: float | None = None,
) -> dict:
    """Page of transactions plus statistics and both charts for one month.

    The four reads run concurrently; if any of them fails, or the join exceeds
    ``timeout`` seconds, the whole view fails with CompositionError.
    """
    flt = build_filter(month, search)
    month_flt = flt.month_only()
    gathered = asyncio.gather(
        asyncio.to_thread(get_page, db_path, flt, page=page, per_page=per_page),
        asyncio.to_thread(get_statistics, db_path, month_flt),
        asyncio.to_thread(get_price_histogram, db_path, month_flt),
        asyncio.to_thread(get_category_histogram, db_path, month_flt),
        return_exceptions=True,
    )
    try:
        results = await asyncio.wait_for(gathered, timeout)
    except asyncio.TimeoutError as exc:
        raise CompositionError("Timed out fetching combined data") from exc

    failures = [result for result in results if isinstance(result, BaseException)]
    if failures:
        raise CompositionError("Error fetching combined data") from failures[0]
    transactions, statistics, bar_chart, pie_chart = results

    return {
        "transactions": transactions,
        "statistics": statistics,
        "barChart": bar_chart,
        "pieChart": pie_chart,
    }
