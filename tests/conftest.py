import base64
import os
import tempfile

# Point the app at a throwaway SQLite file before anything imports the settings.
_TMP_DIR = tempfile.mkdtemp(prefix="pantry-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TMP_DIR}/api.db"
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from db.database import Base
from db.image import ImageBlob  # noqa: F401
from db.inventory.item import InventoryItem  # noqa: F401
from services.image_assets import ImageAssetStore
from services.inventory_store import InventoryStore

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + bytes(range(256)) * 2
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"pantry-photo" * 40


def data_url(data: bytes = PNG_BYTES, content_type: str = "image/png") -> str:
    return f"data:{content_type};base64,{base64.b64encode(data).decode('ascii')}"


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine):
    maker = async_sessionmaker(engine, expire_on_commit=False)
    async with maker() as s:
        yield s


@pytest.fixture
def store(session):
    return InventoryStore(session)


@pytest.fixture
def images(session):
    return ImageAssetStore(session, base_url="http://assets.test")


@pytest.fixture
def client():
    """TestClient over the real app, with both tables emptied first."""
    from db.database import async_session_maker
    from main import app
    from scripts.reset_inventory import reset

    async def _reset():
        async with async_session_maker() as db:
            await reset(db)

    with TestClient(app) as c:
        c.portal.call(_reset)
        yield c


@pytest_asyncio.fixture
async def file_engine(tmp_path):
    """A SQLite file shared by separate connections, for two-writer tests."""
    from sqlalchemy.pool import NullPool

    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path}/pantry.db", poolclass=NullPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def two_sessions(file_engine):
    maker = async_sessionmaker(file_engine, expire_on_commit=False)
    async with maker() as a, maker() as b:
        yield a, b
