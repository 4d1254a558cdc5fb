from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool, StaticPool

from matchpledge.core.settings import settings

if not settings.DB_URL:
    # Fail fast with a clear message instead of throwing from SQLAlchemy
    raise RuntimeError("DB_URL is not configured. Set it in environment or .env before starting the app.")

engine_kwargs = {"echo": False, "future": True}

if settings.DB_URL.startswith("sqlite"):
    engine_kwargs["connect_args"] = {"timeout": 30, "check_same_thread": False}
    # An in-memory database only exists on its one connection; file databases
    # open a fresh connection per checkout so no connection outlives its event loop.
    if ":memory:" in settings.DB_URL or settings.DB_URL.endswith("://"):
        engine_kwargs["poolclass"] = StaticPool
    else:
        engine_kwargs["poolclass"] = NullPool
else:
    engine_kwargs["pool_size"] = 10
    engine_kwargs["pool_timeout"] = 5

engine = create_async_engine(settings.DB_URL, **engine_kwargs)
AsyncSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as s:
        yield s


async def create_schema() -> None:
    """Create all tables that do not exist yet (dev/local; no migrations)."""
    from matchpledge.domain.models import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
