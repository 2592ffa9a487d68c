import asyncio
import gc
import math
import time

import pytest

from salesboard import service
from salesboard.errors import CompositionError, StoreError
from salesboard.query import build_filter
from salesboard.repo import list_txns, replace_all
from salesboard.service import get_combined, get_page

from helpers import make_txn


@pytest.fixture
def march_sales(settings):
    txns = [
        make_txn(
            id=i,
            title=f"Bag {i}" if i % 2 else f"Shirt {i}",
            price=float(i * 10),
            sold=i % 4 == 0,
            category="bags" if i % 2 else "shirts",
        )
        for i in range(1, 24)
    ]
    txns.append(make_txn(id=99, title="Bag April", date_of_sale="2022-04-02T00:00:00Z"))
    replace_all(settings.db_path, txns)
    return settings


@pytest.mark.parametrize("per_page", [1, 5, 10, 23, 50])
@pytest.mark.parametrize("search", [None, "bag"])
def test_pages_cover_the_filtered_set(march_sales, per_page, search):
    flt = build_filter("03", search)
    expected = [txn.to_dict() for txn in list_txns(march_sales.db_path, flt)]

    first = get_page(march_sales.db_path, flt, page=1, per_page=per_page)
    assert first["total"] == len(expected)
    assert first["totalPages"] == math.ceil(len(expected) / per_page)

    collected = []
    for page in range(1, first["totalPages"] + 1):
        result = get_page(march_sales.db_path, flt, page=page, per_page=per_page)
        assert result["page"] == page
        assert len(result["transactions"]) <= per_page
        collected.extend(result["transactions"])
    assert collected == expected


def test_page_past_the_end_is_empty(march_sales):
    result = get_page(march_sales.db_path, build_filter("03"), page=999, per_page=10)
    assert result == {"transactions": [], "total": 23, "page": 999, "totalPages": 3}


def test_page_defaults(march_sales):
    result = get_page(march_sales.db_path, build_filter("03"))
    assert result["page"] == 1
    assert [txn["id"] for txn in result["transactions"]] == list(range(1, 11))


def test_repeated_queries_return_the_same_order(march_sales):
    flt = build_filter("03", "bag")
    first = get_page(march_sales.db_path, flt, page=2, per_page=4)
    second = get_page(march_sales.db_path, flt, page=2, per_page=4)
    assert first == second


@pytest.mark.parametrize("page,per_page", [(0, 10), (1, 0), (-1, 5)])
def test_get_page_rejects_non_positive_paging(march_sales, page, per_page):
    with pytest.raises(ValueError):
        get_page(march_sales.db_path, build_filter("03"), page=page, per_page=per_page)


def test_combined_search_only_narrows_transactions(march_sales):
    view = asyncio.run(
        get_combined(march_sales.db_path, month="03", search="shirt", per_page=5)
    )

    assert set(view) == {"transactions", "statistics", "barChart", "pieChart"}
    assert view["transactions"]["total"] == 11
    assert view["transactions"]["totalPages"] == 3
    assert all("Shirt" in txn["title"] for txn in view["transactions"]["transactions"])

    stats = view["statistics"]
    assert stats["totalSoldItems"] + stats["totalNotSoldItems"] == 23
    assert stats["totalSaleAmount"] == float(sum(i * 10 for i in range(1, 24)))
    assert sum(item["count"] for item in view["barChart"]) == 23
    assert view["pieChart"] == [
        {"_id": "bags", "count": 12},
        {"_id": "shirts", "count": 11},
    ]


def test_combined_fails_as_a_whole(tmp_path):
    # database without the transactions table
    with pytest.raises(CompositionError) as exc_info:
        asyncio.run(get_combined(tmp_path / "empty.sqlite", month="03"))
    assert isinstance(exc_info.value.__cause__, StoreError)


def test_combined_times_out(march_sales, monkeypatch):
    def slow_statistics(db_path, flt):
        time.sleep(0.5)
        return {}

    monkeypatch.setattr(service, "get_statistics", slow_statistics)
    with pytest.raises(CompositionError, match="Timed out"):
        asyncio.run(get_combined(march_sales.db_path, month="03", timeout=0.05))


def test_combined_rejects_bad_month(march_sales):
    with pytest.raises(ValueError):
        asyncio.run(get_combined(march_sales.db_path, month="13"))


@pytest.mark.parametrize(
    "page,per_page", [(2**62, 10), (2, 2**64), (10**30, 10**30)]
)
def test_huge_paging_values_are_past_the_end(march_sales, page, per_page):
    result = get_page(march_sales.db_path, build_filter("03"), page=page, per_page=per_page)
    assert result["transactions"] == []
    assert result["total"] == 23
    assert result["page"] == page
    assert result["totalPages"] == -(-23 // per_page)


def test_huge_per_page_returns_the_whole_set(march_sales):
    result = get_page(march_sales.db_path, build_filter("03"), page=1, per_page=2**64)
    assert len(result["transactions"]) == 23
    assert result["totalPages"] == 1


def test_combined_failure_consumes_every_sub_query_error(tmp_path):
    reported = []

    async def run():
        loop = asyncio.get_running_loop()
        loop.set_exception_handler(lambda loop, context: reported.append(context))
        with pytest.raises(CompositionError) as exc_info:
            await get_combined(tmp_path / "empty.sqlite", month="03")
        gc.collect()
        await asyncio.sleep(0)
        return exc_info.value

    error = asyncio.run(run())
    assert isinstance(error.__cause__, StoreError)
    assert reported == []
