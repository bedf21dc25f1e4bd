"""
任务模型（Kanboard tasks 表）

is_active: 1 = 进行中（open），0 = 已关闭（closed）
"""

from typing import Optional

from sqlalchemy import ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from kanboard_mcp.database.base import Base, IntegerPrimaryKeyMixin, unix_now

STATUS_OPEN = 1
STATUS_CLOSED = 0


class Task(IntegerPrimaryKeyMixin, Base):
    """任务"""

    __tablename__ = "tasks"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True, default="")
    date_creation: Mapped[int] = mapped_column(Integer, nullable=False, default=unix_now)
    date_modification: Mapped[int] = mapped_column(Integer, nullable=False, default=unix_now)
    date_due: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    color_id: Mapped[str] = mapped_column(String(50), nullable=False, default="yellow")
    project_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
    )
    column_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("columns.id", ondelete="CASCADE"),
        nullable=False,
    )
    swimlane_id: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    category_id: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    owner_id: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    creator_id: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[int] = mapped_column(Integer, nullable=False, default=STATUS_OPEN)

    __table_args__ = (
        Index("idx_task_active", "is_active"),
        Index("tasks_project_idx", "project_id"),
    )
