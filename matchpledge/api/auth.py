from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from matchpledge.auth import get_current_user
from matchpledge.core.db import get_session
from matchpledge.domain.models import User
from matchpledge.schemas import AuthOut, LoginIn, PhoneLoginIn, UserCreate, UserOut
from matchpledge.services import credentials

router = APIRouter(prefix="/api/auth", tags=["auth"])

@router.post("/register", response_model=AuthOut)
async def register(payload: UserCreate, db: AsyncSession = Depends(get_session)):
    result = await credentials.register(db, payload.username, payload.phone, payload.password)
    return result.as_response()

@router.post("/login", response_model=AuthOut)
async def login(payload: LoginIn, db: AsyncSession = Depends(get_session)):
    result = await credentials.login(db, payload.username, payload.password, by="username")
    return result.as_response()

@router.post("/login-phone", response_model=AuthOut)
async def login_phone(payload: PhoneLoginIn, db: AsyncSession = Depends(get_session)):
    result = await credentials.login(db, payload.phone, payload.password, by="phone")
    return result.as_response()

@router.get("/me", response_model=UserOut)
async def me(user: User = Depends(get_current_user)):
    return UserOut.model_validate(user)
