"""
数据库引擎与会话管理

使用 SQLAlchemy 2.0 异步引擎（aiosqlite / asyncpg）

会话约定：
- 每个 HTTP 交换一个会话，交换结束时关闭
- 写操作由各个 store 自行提交，单次写入即一次独立的协作方调用
"""

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import AsyncAdaptedQueuePool, NullPool

from kanboard_mcp.core.config import settings
from kanboard_mcp.database.base import Base


def _get_pool_config() -> dict:
    """
    获取连接池配置

    - test / SQLite: 使用 NullPool（无连接池）
    - 其他: 按配置使用队列连接池
    """
    if settings.ENV == "test" or settings.is_sqlite:
        return {"poolclass": NullPool}

    return {
        "poolclass": AsyncAdaptedQueuePool,
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
        "pool_timeout": settings.DB_POOL_TIMEOUT,
        "pool_recycle": settings.DB_POOL_RECYCLE,
    }


# 创建异步引擎
engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_pre_ping=True,
    **_get_pool_config(),
)

# 创建异步会话工厂
async_session_maker = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    获取数据库会话依赖

    用于 FastAPI 路由的依赖注入
    """
    async with async_session_maker() as session:
        yield session


async def init_db(bind: AsyncEngine | None = None) -> None:
    """创建缺失的数据表"""
    # 注册所有模型到 Base.metadata
    from kanboard_mcp.database import models  # noqa: F401

    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """
    关闭数据库连接

    在应用关闭时调用
    """
    await engine.dispose()
