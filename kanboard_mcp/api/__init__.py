"""
API 路由模块

统一注册所有 API 路由
"""

from fastapi import APIRouter

from kanboard_mcp.api import mcp
from kanboard_mcp.core.config import settings

router = APIRouter()

# MCP 网关
router.include_router(mcp.router, prefix=settings.MCP_PATH, tags=["MCP"])
