import math
from datetime import datetime, timezone

MONTH_NAMES = (
    "january",
    "february",
    "march",
    "april",
    "may",
    "june",
    "july",
    "august",
    "september",
    "october",
    "november",
    "december",
)


def parse_month(value: str | None) -> int | None:
    """Return the calendar month (1-12) for ``value``, or None when it is blank.

    Accepts ``"3"``, ``"03"``, ``"March"`` and ``"mar"``. Anything else raises
    ValueError.
    """
    if value is None or not value.strip():
        return None
    s = value.strip().lower()
    if s.isdigit():
        if len(s) > 2 or not 1 <= int(s) <= 12:
            raise ValueError("month must be between 01 and 12")
        return int(s)
    for number, name in enumerate(MONTH_NAMES, start=1):
        if s == name or s == name[:3]:
            return number
    raise ValueError("month invalid")


def parse_positive_int(value: str | None, *, name: str, default: int) -> int:
    if value is None or not str(value).strip():
        return default
    try:
        n = int(str(value).strip())
    except ValueError as e:
        raise ValueError(f"{name} must be an integer") from e
    if n < 1:
        raise ValueError(f"{name} must be at least 1")
    return n


def parse_search_number(search: str | None) -> float | None:
    if search is None:
        return None
    s = search.strip()
    if not s or "_" in s:
        return None
    try:
        n = float(s)
    except ValueError:
        return None
    if not math.isfinite(n):
        return None
    return n


def normalize_sale_date(value) -> tuple[str, int]:
    """Normalize an ISO-8601 date to a UTC timestamp string and its month.

    Naive values are taken as UTC.
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError("dateOfSale required")
    try:
        dt = datetime.fromisoformat(value.strip())
    except ValueError as e:
        raise ValueError(f"dateOfSale invalid: {value!r}") from e
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    else:
        dt = dt.astimezone(timezone.utc)
    stamp = dt.strftime("%Y-%m-%dT%H:%M:%S") + f".{dt.microsecond // 1000:03d}Z"
    return stamp, dt.month
