from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from matchpledge.core.db import get_session
from matchpledge.schemas import GameCreate, GameOut
from matchpledge.services import games as game_service

router = APIRouter(prefix="/api/games", tags=["games"])


@router.get("", response_model=List[GameOut])
async def get_games(
    status: Optional[str] = None,
    league: Optional[str] = None,
    db: AsyncSession = Depends(get_session),
):
    return await game_service.list_games(db, status=status, league=league)


@router.post("", response_model=GameOut)
async def create_game(payload: GameCreate, db: AsyncSession = Depends(get_session)):
    return await game_service.create_game(db, payload)
