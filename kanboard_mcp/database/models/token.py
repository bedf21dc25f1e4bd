"""
MCP Token 模型

存储 MCP 能力令牌，同一时间最多只有一个有效令牌
"""

from sqlalchemy import Boolean, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from kanboard_mcp.database.base import Base, IntegerPrimaryKeyMixin, unix_now


class McpToken(IntegerPrimaryKeyMixin, Base):
    """MCP 能力令牌"""

    __tablename__ = "mcp_tokens"

    token: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, default="Default Token")
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[int] = mapped_column(Integer, nullable=False, default=unix_now)

    __table_args__ = (
        Index("idx_mcp_token", "token"),
        Index("idx_mcp_active", "is_active"),
    )

    def __repr__(self) -> str:
        return f"<McpToken(id={self.id}, name={self.name!r}, active={self.is_active})>"
