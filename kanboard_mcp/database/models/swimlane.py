"""
泳道模型（Kanboard swimlanes 表）
"""

from typing import Optional

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from kanboard_mcp.database.base import Base, IntegerPrimaryKeyMixin


class Swimlane(IntegerPrimaryKeyMixin, Base):
    """泳道"""

    __tablename__ = "swimlanes"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    project_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
    )
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True, default="")
