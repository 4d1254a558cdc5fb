"""
Filter composition for list endpoints.

Optional equality filters become a `1=1 AND col = :col ...` predicate. Only
fixed column literals ever reach the SQL text; every caller value travels as a
bound parameter, in the same fixed order as its clause.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence, Tuple

from sqlalchemy import text
from sqlalchemy.sql.elements import TextClause

BASE_PREDICATE = "1=1"

# Clause order is part of the contract: same input, same text, same params.
PLEDGE_FILTER_FIELDS: Tuple[str, ...] = ("username", "phone", "home_team", "away_team")
PLEDGE_ORDER_BY = "created_at DESC, id DESC"

GAME_FILTER_FIELDS: Tuple[str, ...] = ("status", "league")
GAME_ORDER_BY = "created_at DESC, id DESC"


@dataclass(frozen=True)
class PledgeFilters:
    username: Optional[str] = None
    phone: Optional[str] = None
    home_team: Optional[str] = None
    away_team: Optional[str] = None
    # Accepted from the query string; pledges carry no status column.
    status: Optional[str] = None

    def as_mapping(self) -> dict:
        return {
            "username": self.username,
            "phone": self.phone,
            "home_team": self.home_team,
            "away_team": self.away_team,
            "status": self.status,
        }


@dataclass(frozen=True)
class ComposedQuery:
    where: str
    params: Tuple[Tuple[str, Any], ...]
    order_by: str
    limit: Optional[int] = None

    def bindings(self) -> dict:
        out = dict(self.params)
        if self.limit is not None:
            out["limit"] = self.limit
        return out

    def clause(self) -> TextClause:
        """The WHERE predicate as a SQLAlchemy text() with every value bound."""
        clause = text(self.where)
        if self.params:
            clause = clause.bindparams(**dict(self.params))
        return clause

    def sql(self, table: str) -> str:
        stmt = f"SELECT * FROM {table} WHERE {self.where} ORDER BY {self.order_by}"
        if self.limit is not None:
            stmt += " LIMIT :limit"
        return stmt


def is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


def compose_filters(
    values: Mapping[str, Any],
    fields: Sequence[str],
    order_by: str,
    limit: Optional[int] = None,
) -> ComposedQuery:
    """Build the predicate for `fields` (in that order) from whichever of them are present in `values`."""
    clauses = [BASE_PREDICATE]
    params = []
    for name in fields:
        value = values.get(name)
        if not is_present(value):
            continue
        clauses.append(f"{name} = :{name}")
        params.append((name, value))
    if limit is not None and limit < 0:
        raise ValueError("limit must be non-negative")
    return ComposedQuery(
        where=" AND ".join(clauses),
        params=tuple(params),
        order_by=order_by,
        limit=limit,
    )


def build_pledge_query(filters: PledgeFilters, limit: Optional[int] = None) -> ComposedQuery:
    return compose_filters(filters.as_mapping(), PLEDGE_FILTER_FIELDS, PLEDGE_ORDER_BY, limit)


def build_game_query(status: Optional[str] = None, league: Optional[str] = None) -> ComposedQuery:
    return compose_filters({"status": status, "league": league}, GAME_FILTER_FIELDS, GAME_ORDER_BY)
