"""
SQL construction for user listings.

The filter predicate is built once (`build_predicate`) and handed to both
`select_statement` and `count_statement`, so the count always covers exactly
the rows the paged fetch walks over.

Ranges (limit 1..1000, offset >= 0) are enforced by the router before this
module is reached.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .fields import SELECT_COLUMNS, TABLE, col, quote_ident


@dataclass(frozen=True)
class UserFilters:
    search: str | None = None
    country: str | None = None
    company: str | None = None
    limit: int | None = None
    offset: int = 0


@dataclass(frozen=True)
class Predicate:
    # Full "WHERE ..." clause, or "" when no filter applies.
    sql: str = ""
    params: tuple = field(default_factory=tuple)


@dataclass(frozen=True)
class Statement:
    sql: str
    params: tuple = field(default_factory=tuple)


ORDER_BY = f"ORDER BY {col('created_at')} DESC, {col('id')} ASC"


def _clean(value: str | None) -> str:
    # Only None and "" mean absent; the term is matched as given.
    return value or ""


def escape_like(term: str) -> str:
    """
    Escape LIKE metacharacters so `term` matches literally.
    Postgres uses backslash as the default LIKE escape character.
    """
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def contains_pattern(term: str) -> str:
    return f"%{escape_like(term)}%"


def build_predicate(filters: UserFilters) -> Predicate:
    """
    AND together the filters that are present. Each text filter binds one
    parameter; the search term is reused by all four of its comparisons.
    """
    conditions: list[str] = []
    params: list[str] = []

    search = _clean(filters.search)
    if search:
        params.append(contains_pattern(search))
        n = f"${len(params)}"
        conditions.append(
            "("
            f"concat({col('firstName')}, ' ', {col('lastName')}) ILIKE {n}"
            f" OR {col('email')} ILIKE {n}"
            f" OR {col('company.name')} ILIKE {n}"
            f" OR {col('company.title')} ILIKE {n}"
            ")"
        )

    country = _clean(filters.country)
    if country:
        params.append(contains_pattern(country))
        conditions.append(f"{col('address.country')} ILIKE ${len(params)}")

    company = _clean(filters.company)
    if company:
        params.append(contains_pattern(company))
        conditions.append(f"{col('company.name')} ILIKE ${len(params)}")

    if not conditions:
        return Predicate()
    return Predicate(sql="WHERE " + " AND ".join(conditions), params=tuple(params))


def _join(*parts: str) -> str:
    return " ".join(p for p in parts if p)


def select_statement(predicate: Predicate, *, limit: int | None = None, offset: int = 0) -> Statement:
    """
    Ordered fetch over the predicate. No limit means no LIMIT clause at all;
    OFFSET is only emitted alongside a limit.
    """
    params = list(predicate.params)
    paging = ""
    if limit is not None:
        params.append(int(limit))
        paging = f"LIMIT ${len(params)}"
        if offset:
            params.append(int(offset))
            paging += f" OFFSET ${len(params)}"

    sql = _join(
        f"SELECT {SELECT_COLUMNS}",
        f"FROM {quote_ident(TABLE)}",
        predicate.sql,
        ORDER_BY,
        paging,
    )
    return Statement(sql=sql, params=tuple(params))


def count_statement(predicate: Predicate) -> Statement:
    sql = _join(
        "SELECT count(*) AS total",
        f"FROM {quote_ident(TABLE)}",
        predicate.sql,
    )
    return Statement(sql=sql, params=predicate.params)


def by_id_statement(user_id: int) -> Statement:
    sql = _join(
        f"SELECT {SELECT_COLUMNS}",
        f"FROM {quote_ident(TABLE)}",
        f"WHERE {col('id')} = $1",
    )
    return Statement(sql=sql, params=(user_id,))
