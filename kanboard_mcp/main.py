"""
Kanboard MCP Server 主入口

职责:
- 通过 MCP（Model Context Protocol）暴露 Kanboard 项目、任务、列、分类、泳道操作
- URL 能力令牌认证
- SSE / Streamable HTTP 双传输
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from kanboard_mcp.api import router as api_router
from kanboard_mcp.core.config import settings
from kanboard_mcp.core.logging import get_logger, setup_logging
from kanboard_mcp.database.engine import close_db, init_db

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """应用生命周期管理"""
    setup_logging()
    if settings.AUTO_CREATE_TABLES:
        await init_db()
    logger.info(
        "mcp_server_started",
        env=settings.ENV,
        path=settings.MCP_PATH,
        protocol_version=settings.MCP_PROTOCOL_VERSION,
    )
    yield
    await close_db()


def create_app() -> FastAPI:
    """创建 FastAPI 应用实例"""
    app = FastAPI(
        title=settings.MCP_SERVER_NAME,
        description="Model Context Protocol 网关：让 AI 助手操作 Kanboard 项目与任务",
        version=settings.MCP_SERVER_VERSION,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        lifespan=lifespan,
    )

    app.include_router(api_router)

    @app.get("/health")
    async def health_check() -> dict:
        """健康检查端点"""
        return {
            "status": "healthy",
            "service": "kanboard-mcp",
            "version": settings.MCP_SERVER_VERSION,
        }

    return app


app = create_app()
