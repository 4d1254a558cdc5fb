from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from matchpledge.core.db import get_session
from matchpledge.schemas import PledgeCreate, PledgeOut, PledgeStatsOut
from matchpledge.services import pledges as pledge_service
from matchpledge.services.pledge_stats import pledge_stats
from matchpledge.services.query_builder import PledgeFilters

router = APIRouter(prefix="/api/pledges", tags=["pledges"])


@router.get("", response_model=List[PledgeOut])
async def get_pledges(
    username: Optional[str] = None,
    phone: Optional[str] = None,
    home_team: Optional[str] = None,
    away_team: Optional[str] = None,
    status: Optional[str] = None,
    db: AsyncSession = Depends(get_session),
):
    filters = PledgeFilters(
        username=username, phone=phone, home_team=home_team, away_team=away_team, status=status
    )
    return await pledge_service.list_pledges(db, filters)


@router.post("", response_model=PledgeOut)
async def create_pledge(payload: PledgeCreate, db: AsyncSession = Depends(get_session)):
    return await pledge_service.create_pledge(db, payload)


@router.get("/stats", response_model=PledgeStatsOut)
async def get_pledge_stats(
    home_team: Optional[str] = None,
    away_team: Optional[str] = None,
    db: AsyncSession = Depends(get_session),
):
    return await pledge_stats(db, home_team, away_team)


@router.get("/user", response_model=List[PledgeOut])
async def get_user_pledges(username: Optional[str] = None, db: AsyncSession = Depends(get_session)):
    return await pledge_service.user_pledges(db, username)


@router.get("/recent", response_model=List[PledgeOut])
async def get_recent_pledges(db: AsyncSession = Depends(get_session)):
    return await pledge_service.recent_pledges(db)
