from __future__ import annotations

import datetime as dt
import logging
from typing import List

from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncSession

from matchpledge.domain.models import Pledge
from matchpledge.errors import InvalidRequest
from matchpledge.schemas import PledgeCreate
from matchpledge.services.query_builder import ComposedQuery, PledgeFilters, build_pledge_query, is_present

logger = logging.getLogger("pledges")

SELECTIONS = ("home_team", "away_team", "draw")
RECENT_LIMIT = 10


def validate_pledge(payload: PledgeCreate) -> None:
    # blank here would be dropped as absent by the list filters
    if not all(is_present(v) for v in (payload.username, payload.phone, payload.selection)):
        raise InvalidRequest("username, phone and selection are required")
    if payload.selection not in SELECTIONS:
        raise InvalidRequest(f"selection must be one of {', '.join(SELECTIONS)}")
    # NaN fails this comparison too
    if not payload.amount > 0:
        raise InvalidRequest("amount must be greater than zero")


async def create_pledge(db: AsyncSession, payload: PledgeCreate) -> Pledge:
    validate_pledge(payload)
    now = dt.datetime.now(dt.timezone.utc)
    p = Pledge(
        username=payload.username,
        phone=payload.phone,
        selection=payload.selection,
        amount=payload.amount,
        time=now,
        fan=payload.fan,
        home_team=payload.home_team,
        away_team=payload.away_team,
        created_at=now,
        updated_at=now,
    )
    db.add(p)
    await db.commit()
    await db.refresh(p)
    logger.info("pledge id=%s user=%s amount=%s on %s vs %s", p.id, p.username, p.amount, p.home_team, p.away_team)
    return p


async def _run(db: AsyncSession, q: ComposedQuery) -> List[Pledge]:
    logger.debug("pledge query: %s params=%s", q.sql("pledges"), q.params)
    stmt = select(Pledge).where(q.clause()).order_by(text(q.order_by))
    if q.limit is not None:
        stmt = stmt.limit(q.limit)
    res = await db.execute(stmt)
    return list(res.scalars().all())


async def list_pledges(db: AsyncSession, filters: PledgeFilters) -> List[Pledge]:
    return await _run(db, build_pledge_query(filters))


async def user_pledges(db: AsyncSession, username: str | None) -> List[Pledge]:
    if not username or not username.strip():
        raise InvalidRequest("username is required")
    return await _run(db, build_pledge_query(PledgeFilters(username=username)))


async def recent_pledges(db: AsyncSession, limit: int = RECENT_LIMIT) -> List[Pledge]:
    return await _run(db, build_pledge_query(PledgeFilters(), limit=min(limit, RECENT_LIMIT)))
