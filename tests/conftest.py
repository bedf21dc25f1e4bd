"""
测试配置和 fixtures
"""

import os

os.environ.setdefault("ENV", "test")

from typing import AsyncGenerator  # noqa: E402
from unittest.mock import AsyncMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from kanboard_mcp.api.deps import get_engine_stores, get_token_store  # noqa: E402
from kanboard_mcp.database.engine import get_db, init_db  # noqa: E402
from kanboard_mcp.main import app  # noqa: E402
from kanboard_mcp.services.base import (  # noqa: E402
    CategoryStore,
    ColumnStore,
    CommentStore,
    EngineStores,
    ProjectStore,
    SwimlaneStore,
    TaskStore,
    TokenStore,
    UserStore,
)

# 测试数据库 URL（内存 SQLite，StaticPool 保证所有会话共用同一连接）
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

VALID_TOKEN = "a" * 64


@pytest.fixture
def stores() -> EngineStores:
    """全部协作方的 AsyncMock 替身"""
    return EngineStores(
        projects=AsyncMock(spec=ProjectStore),
        tasks=AsyncMock(spec=TaskStore),
        columns=AsyncMock(spec=ColumnStore),
        categories=AsyncMock(spec=CategoryStore),
        swimlanes=AsyncMock(spec=SwimlaneStore),
        users=AsyncMock(spec=UserStore),
        comments=AsyncMock(spec=CommentStore),
    )


@pytest.fixture
def token_store() -> AsyncMock:
    """只认 VALID_TOKEN 的令牌存储"""
    store = AsyncMock(spec=TokenStore)
    store.validate.side_effect = lambda token: token == VALID_TOKEN
    return store


@pytest_asyncio.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """创建测试数据库引擎"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await init_db(engine)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """创建测试数据库会话"""
    async_session = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session


@pytest_asyncio.fixture
async def client(
    token_store: AsyncMock,
    stores: EngineStores,
) -> AsyncGenerator[AsyncClient, None]:
    """创建测试客户端（令牌存储和协作方均为替身）"""
    app.dependency_overrides[get_db] = lambda: AsyncMock(spec=AsyncSession)
    app.dependency_overrides[get_token_store] = lambda: token_store
    app.dependency_overrides[get_engine_stores] = lambda: stores

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
