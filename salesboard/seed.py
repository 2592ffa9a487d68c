"""Wholesale reseed of the record store from a remote JSON dataset."""

import asyncio
import logging
import math

import httpx

from .errors import UpstreamFetchError
from .logic import normalize_sale_date
from .models import Transaction
from .repo import replace_all

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = (
    "id",
    "title",
    "description",
    "price",
    "category",
    "sold",
    "dateOfSale",
    "image",
)


async def fetch_seed(
    url: str,
    *,
    timeout: float = 20.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[dict]:
    async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
        try:
            response = await client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise UpstreamFetchError(f"Error fetching seed data: {exc}") from exc

    try:
        payload = response.json()
    except ValueError as exc:
        raise UpstreamFetchError("Seed data is not valid JSON") from exc
    if not isinstance(payload, list):
        raise UpstreamFetchError("Seed data must be a JSON array")
    return payload


def _parse_sold(value) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)) and value in (0, 1):
        return bool(value)
    if isinstance(value, str) and value.strip().lower() in {"true", "false"}:
        return value.strip().lower() == "true"
    raise ValueError(f"sold invalid: {value!r}")


def _parse_price(value) -> float:
    price = float(value)
    if not math.isfinite(price):
        raise ValueError(f"price invalid: {value!r}")
    return price


def parse_seed_record(raw: dict) -> Transaction:
    if not isinstance(raw, dict):
        raise ValueError("record must be an object")
    missing = [name for name in REQUIRED_FIELDS if name not in raw]
    if missing:
        raise ValueError(f"missing fields: {', '.join(missing)}")
    date_of_sale, _ = normalize_sale_date(raw["dateOfSale"])
    return Transaction(
        id=int(raw["id"]),
        title=str(raw["title"]),
        description=str(raw["description"]),
        price=_parse_price(raw["price"]),
        category=str(raw["category"]),
        sold=_parse_sold(raw["sold"]),
        date_of_sale=date_of_sale,
        image=str(raw["image"]),
    )


def parse_seed_records(raw_records: list) -> list[Transaction]:
    transactions = []
    for index, raw in enumerate(raw_records):
        try:
            transactions.append(parse_seed_record(raw))
        except (TypeError, ValueError) as exc:
            raise UpstreamFetchError(f"Seed record {index} invalid: {exc}") from exc
    return transactions


async def initialize(
    db_path,
    *,
    url: str,
    timeout: float = 20.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> int:
    raw_records = await fetch_seed(url, timeout=timeout, transport=transport)
    transactions = parse_seed_records(raw_records)
    count = await asyncio.to_thread(replace_all, db_path, transactions)
    logger.info("Initialized store from %s with %d transactions", url, count)
    return count
