"""pytest configuration and fixtures."""

import os
import tempfile

# Set required environment variables for testing before any imports
_TMP = tempfile.mkdtemp(prefix="matchpledge-tests-")
os.environ.setdefault("ENV", "test")
os.environ.setdefault("JWT_SECRET", "test-signing-secret-0123456789abcdef")
os.environ.setdefault("DB_URL", f"sqlite+aiosqlite:///{os.path.join(_TMP, 'test.db')}")
os.environ.setdefault("LOCAL_UPLOAD_DIR", os.path.join(_TMP, "uploads"))
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("RUN_DDL_ON_START", "false")

import httpx  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402

from matchpledge.core.db import AsyncSessionLocal, engine  # noqa: E402
from matchpledge.core.settings import settings  # noqa: E402
from matchpledge.domain.models import Base  # noqa: E402
from matchpledge.main import app  # noqa: E402


@pytest_asyncio.fixture
async def db_schema():
    """Fresh tables for every test."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield


@pytest_asyncio.fixture
async def session(db_schema):
    async with AsyncSessionLocal() as s:
        yield s


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    """Point the content store at a per-test directory."""
    root = tmp_path / "uploads"
    monkeypatch.setattr(settings, "LOCAL_UPLOAD_DIR", str(root))
    return root / "images"


@pytest_asyncio.fixture
async def client(db_schema, upload_dir):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


def stored_files(folder) -> list:
    if not folder.exists():
        return []
    return [p for p in folder.rglob("*") if p.is_file()]
