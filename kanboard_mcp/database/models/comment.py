"""
任务评论模型（Kanboard comments 表）
"""

from sqlalchemy import ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from kanboard_mcp.database.base import Base, IntegerPrimaryKeyMixin, unix_now


class Comment(IntegerPrimaryKeyMixin, Base):
    """任务评论"""

    __tablename__ = "comments"

    task_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("tasks.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    date_creation: Mapped[int] = mapped_column(Integer, nullable=False, default=unix_now)
    date_modification: Mapped[int] = mapped_column(Integer, nullable=False, default=unix_now)
    comment: Mapped[str] = mapped_column(Text, nullable=False)
