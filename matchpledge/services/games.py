from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncSession

from matchpledge.domain.models import Game
from matchpledge.errors import InvalidRequest
from matchpledge.schemas import GameCreate
from matchpledge.services.query_builder import build_game_query

logger = logging.getLogger("games")

DEFAULT_STATUS = "Upcoming"


async def list_games(db: AsyncSession, status: Optional[str] = None, league: Optional[str] = None) -> List[Game]:
    q = build_game_query(status=status, league=league)
    res = await db.execute(select(Game).where(q.clause()).order_by(text(q.order_by)))
    return list(res.scalars().all())


async def create_game(db: AsyncSession, payload: GameCreate) -> Game:
    if not payload.home_team.strip() or not payload.away_team.strip():
        raise InvalidRequest("home_team and away_team are required")
    g = Game(**payload.model_dump(), status=DEFAULT_STATUS)
    db.add(g)
    await db.commit()
    await db.refresh(g)
    logger.info("game id=%s created: %s vs %s", g.id, g.home_team, g.away_team)
    return g
