from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import jwt
import datetime as dt
import logging

from matchpledge.core.settings import settings
from matchpledge.core.db import get_session
from matchpledge.domain.models import User
from matchpledge.errors import CredentialError, Unauthorized

logger = logging.getLogger("auth")

ALGORITHM = "HS256"
TOKEN_LIFETIME = dt.timedelta(hours=24)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def create_token(user_id: int, username: str, phone: str, now: dt.datetime | None = None) -> str:
    """Sign a session token that expires exactly 24 hours after issuance."""
    now = now or dt.datetime.now(dt.timezone.utc)
    payload = {
        "sub": str(user_id),
        "username": username,
        "phone": phone,
        "iat": now,
        "exp": now + TOKEN_LIFETIME,
    }
    try:
        return jwt.encode(payload, settings.JWT_SECRET, algorithm=ALGORITHM)
    except jwt.PyJWTError as exc:
        raise CredentialError(f"token signing failed: {exc}") from exc


def decode_token(token: str | None) -> dict:
    """Return the verified claims. Bad signature, expiry or shape -> Unauthorized."""
    if not token:
        raise Unauthorized("Missing token")
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[ALGORITHM],
            leeway=0,
            options={"require": ["exp", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        raise Unauthorized("Token expired")
    except jwt.PyJWTError:
        raise Unauthorized("Invalid token")


async def get_current_user(
    db: AsyncSession = Depends(get_session), token: str | None = Depends(oauth2_scheme)
) -> User:
    """Resolve and return the currently authenticated user from the JWT."""
    claims = decode_token(token)
    try:
        user_id = int(claims["sub"])
    except (TypeError, ValueError):
        raise Unauthorized("Invalid token")
    res = await db.execute(select(User).where(User.id == user_id))
    user = res.scalar_one_or_none()
    if not user:
        logger.warning("token for unknown user id=%s", user_id)
        raise Unauthorized("Invalid token")
    return user
