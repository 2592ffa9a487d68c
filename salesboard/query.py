from dataclasses import dataclass

from .logic import parse_month, parse_search_number


@dataclass(frozen=True)
class TransactionFilter:
    month: int | None = None
    search: str | None = None

    def month_only(self) -> "TransactionFilter":
        return TransactionFilter(month=self.month)

    def to_sql(self) -> tuple[str, tuple]:
        clauses = []
        params: list = []
        if self.month is not None:
            clauses.append("sale_month = ?")
            params.append(self.month)

        term = (self.search or "").strip()
        if term:
            matches = ["contains_ci(title, ?)", "contains_ci(description, ?)"]
            params.extend([term, term])
            price = parse_search_number(term)
            if price is not None:
                matches.append("price = ?")
                params.append(price)
            clauses.append("(" + " OR ".join(matches) + ")")

        if not clauses:
            return "1 = 1", ()
        return " AND ".join(clauses), tuple(params)


def build_filter(month: str | None, search: str | None = None) -> TransactionFilter:
    term = search.strip() if search else None
    return TransactionFilter(month=parse_month(month), search=term or None)
