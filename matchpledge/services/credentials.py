"""Registration and login: bcrypt password checks plus token issuance."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from matchpledge.auth import create_token
from matchpledge.domain.models import User
from matchpledge.errors import Conflict, InvalidUserData, Unauthorized
from matchpledge.schemas import AuthOut, UserOut
from matchpledge.security import MAX_PASSWORD_BYTES, dummy_hash, hash_password, password_fits, verify_password

logger = logging.getLogger("credentials")

INVALID_CREDENTIALS = "Invalid credentials"


@dataclass(frozen=True)
class AuthResult:
    user: UserOut
    token: str

    def as_response(self) -> AuthOut:
        return AuthOut(user=self.user, token=self.token)


def _issue(user: User) -> AuthResult:
    summary = UserOut.model_validate(user)
    return AuthResult(user=summary, token=create_token(user.id, user.username, user.phone))


async def register(db: AsyncSession, username: str, phone: str, password: str) -> AuthResult:
    username = (username or "").strip()
    phone = (phone or "").strip()
    if not username or not phone or not password:
        raise InvalidUserData("username, phone and password are required")
    if not password_fits(password):
        raise InvalidUserData(f"password must be at most {MAX_PASSWORD_BYTES} bytes")

    exists = (
        await db.execute(select(User.id).where(or_(User.username == username, User.phone == phone)).limit(1))
    ).scalar_one_or_none()
    if exists is not None:
        raise Conflict("Username or phone already registered")

    u = User(username=username, phone=phone, password_hash=hash_password(password), balance=0.0)
    db.add(u)
    try:
        await db.commit()
    except IntegrityError:
        # lost a race against a concurrent registration
        await db.rollback()
        raise Conflict("Username or phone already registered")
    await db.refresh(u)
    logger.info("registered user id=%s username=%s", u.id, u.username)
    return _issue(u)


async def login(db: AsyncSession, identifier: str, password: str, by: str = "username") -> AuthResult:
    """Look the user up by username or phone; every failure reads the same to the caller."""
    column = {"username": User.username, "phone": User.phone}[by]
    identifier = (identifier or "").strip()
    password = password or ""
    user = None
    if identifier:
        user = (await db.execute(select(User).where(column == identifier))).scalar_one_or_none()

    # no stored password can be this long; still pay for one bcrypt check
    if user is None or not password_fits(password):
        verify_password("", dummy_hash())
        raise Unauthorized(INVALID_CREDENTIALS)
    if not verify_password(password, user.password_hash):
        raise Unauthorized(INVALID_CREDENTIALS)
    return _issue(user)
