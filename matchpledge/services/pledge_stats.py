"""
Per-match pledge statistics.

Each figure is its own aggregate read over the match subset. Nothing ties the
reads to one snapshot, so under concurrent pledging the breakdown may briefly
disagree with the total; that is logged, not raised.
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from matchpledge.errors import InvalidRequest
from matchpledge.schemas import MatchRef, PledgeStatsOut, SelectionBreakdown
from matchpledge.services.pledges import SELECTIONS
from matchpledge.services.query_builder import PledgeFilters, build_pledge_query, is_present

logger = logging.getLogger("pledge_stats")


async def pledge_stats(db: AsyncSession, home_team: Optional[str], away_team: Optional[str]) -> PledgeStatsOut:
    if not is_present(home_team) or not is_present(away_team):
        raise InvalidRequest("home_team and away_team are both required")

    q = build_pledge_query(PledgeFilters(home_team=home_team, away_team=away_team))
    params = q.bindings()

    total_pledges = (
        await db.execute(text(f"SELECT COUNT(*) FROM pledges WHERE {q.where}"), params)
    ).scalar_one()
    total_amount = (
        await db.execute(text(f"SELECT SUM(amount) FROM pledges WHERE {q.where}"), params)
    ).scalar_one()

    breakdown = {}
    for selection in SELECTIONS:
        res = await db.execute(
            text(f"SELECT COUNT(*) FROM pledges WHERE {q.where} AND selection = :selection"),
            {**params, "selection": selection},
        )
        breakdown[selection] = int(res.scalar_one() or 0)

    total_pledges = int(total_pledges or 0)
    categorized = sum(breakdown.values())
    if categorized > total_pledges:
        logger.warning(
            "breakdown %s exceeds total %s for %s vs %s (concurrent writes)",
            categorized, total_pledges, home_team, away_team,
        )
    elif categorized < total_pledges:
        logger.debug("%s uncategorized pledges for %s vs %s", total_pledges - categorized, home_team, away_team)

    return PledgeStatsOut(
        total_pledges=total_pledges,
        total_amount=float(total_amount or 0.0),
        selection_breakdown=SelectionBreakdown(**breakdown),
        match=MatchRef(home_team=home_team, away_team=away_team),
    )
