"""
看板列模型（Kanboard columns 表）

position 为项目内从 1 开始的连续序号
"""

from typing import Optional

from sqlalchemy import ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from kanboard_mcp.database.base import Base, IntegerPrimaryKeyMixin


class Column(IntegerPrimaryKeyMixin, Base):
    """看板列"""

    __tablename__ = "columns"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    project_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
    )
    task_limit: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True, default="")

    __table_args__ = (
        Index("columns_project_idx", "project_id"),
    )
