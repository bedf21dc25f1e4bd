"""
任务分类模型（Kanboard project_has_categories 表）
"""

from typing import Optional

from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from kanboard_mcp.database.base import Base, IntegerPrimaryKeyMixin


class Category(IntegerPrimaryKeyMixin, Base):
    """任务分类"""

    __tablename__ = "project_has_categories"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    project_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
    )
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True, default="")
    color_id: Mapped[Optional[str]] = mapped_column(String(50), nullable=True, default=None)
