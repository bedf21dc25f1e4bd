"""
API 依赖注入

提供令牌存储、引擎协作方等依赖
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from kanboard_mcp.database.engine import get_db
from kanboard_mcp.services import EngineStores, SQLTokenStore, TokenStore, build_engine_stores


async def get_token_store(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenStore:
    """获取令牌存储"""
    return SQLTokenStore(db)


async def get_engine_stores(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> EngineStores:
    """获取引擎协作方（与令牌存储共享同一个会话）"""
    return build_engine_stores(db)


# 类型别名
DbSession = Annotated[AsyncSession, Depends(get_db)]
TokenStoreDep = Annotated[TokenStore, Depends(get_token_store)]
EngineStoresDep = Annotated[EngineStores, Depends(get_engine_stores)]
