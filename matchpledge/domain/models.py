from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy import String, Text, Float, Integer, Index, TIMESTAMP
import uuid, datetime as dt


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class Base(DeclarativeBase):
    pass

class User(Base):
    __tablename__ = "users"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(64), unique=True, index=True)
    phone: Mapped[str] = mapped_column(String(32), unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String)
    balance: Mapped[float] = mapped_column(Float, default=0.0)
    created_at: Mapped[dt.datetime] = mapped_column(TIMESTAMP(timezone=True), default=_utcnow)
    updated_at: Mapped[dt.datetime] = mapped_column(TIMESTAMP(timezone=True), default=_utcnow, onupdate=_utcnow)


class Pledge(Base):
    """A recorded bet intent. Username/phone/teams are copied in, not foreign keys."""

    __tablename__ = "pledges"
    __table_args__ = (Index("ix_pledges_match", "home_team", "away_team"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(64), index=True)
    phone: Mapped[str] = mapped_column(String(32))
    selection: Mapped[str] = mapped_column(String(16))  # home_team, away_team, draw
    amount: Mapped[float] = mapped_column(Float)
    time: Mapped[dt.datetime] = mapped_column(TIMESTAMP(timezone=True), default=_utcnow)
    fan: Mapped[str] = mapped_column(String, default="")
    home_team: Mapped[str] = mapped_column(String)
    away_team: Mapped[str] = mapped_column(String)
    created_at: Mapped[dt.datetime] = mapped_column(TIMESTAMP(timezone=True), default=_utcnow, index=True)
    updated_at: Mapped[dt.datetime] = mapped_column(TIMESTAMP(timezone=True), default=_utcnow, onupdate=_utcnow)


class Post(Base):
    __tablename__ = "posts"
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id: Mapped[str] = mapped_column(String, index=True)
    user_name: Mapped[str] = mapped_column(String)
    caption: Mapped[str] = mapped_column(Text, default="")
    image_url: Mapped[str] = mapped_column(String)
    image_path: Mapped[str] = mapped_column(String)  # private; never serialized
    created_at: Mapped[dt.datetime] = mapped_column(TIMESTAMP(timezone=True), default=_utcnow, index=True)
    updated_at: Mapped[dt.datetime] = mapped_column(TIMESTAMP(timezone=True), default=_utcnow, onupdate=_utcnow)


class Game(Base):
    __tablename__ = "games"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    home_team: Mapped[str] = mapped_column(String)
    away_team: Mapped[str] = mapped_column(String)
    league: Mapped[str] = mapped_column(String, default="", index=True)
    # odds and kick-off are opaque display strings
    home_win: Mapped[str] = mapped_column(String, default="")
    away_win: Mapped[str] = mapped_column(String, default="")
    draw: Mapped[str] = mapped_column(String, default="")
    date: Mapped[str] = mapped_column(String, default="")
    status: Mapped[str] = mapped_column(String, default="Upcoming", index=True)
    created_at: Mapped[dt.datetime] = mapped_column(TIMESTAMP(timezone=True), default=_utcnow)
