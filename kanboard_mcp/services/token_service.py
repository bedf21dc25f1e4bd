"""
MCP 令牌服务

同一时间最多一个有效令牌：生成新令牌时，在同一事务内
先停用所有旧令牌，再写入新令牌
"""

from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from kanboard_mcp.core.logging import get_logger
from kanboard_mcp.core.security import generate_capability_token, tokens_match
from kanboard_mcp.database.base import unix_now
from kanboard_mcp.database.models import McpToken
from kanboard_mcp.services.base import Record, TokenStore

logger = get_logger(__name__)


class SQLTokenStore(TokenStore):
    """基于数据库的令牌存储"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def validate(self, token: str) -> bool:
        if not token:
            return False

        result = await self.db.execute(
            select(McpToken.token).where(
                McpToken.token == token,
                McpToken.is_active == True,  # noqa: E712
            )
        )
        stored = result.scalar_one_or_none()
        return stored is not None and tokens_match(token, stored)

    async def current_token(self) -> Optional[str]:
        result = await self.db.execute(
            select(McpToken.token)
            .where(McpToken.is_active == True)  # noqa: E712
            .order_by(McpToken.id.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def generate_token(self, name: str) -> str:
        token = generate_capability_token()
        try:
            await self.db.execute(update(McpToken).values(is_active=False))
            self.db.add(
                McpToken(
                    token=token,
                    name=name,
                    is_active=True,
                    created_at=unix_now(),
                )
            )
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info("mcp_token_generated", name=name)
        return token

    async def list_tokens(self) -> List[Record]:
        result = await self.db.execute(select(McpToken).order_by(McpToken.id))
        return [
            {
                "id": row.id,
                "name": row.name,
                "is_active": row.is_active,
                "created_at": row.created_at,
            }
            for row in result.scalars().all()
        ]
