"""
项目模型（Kanboard projects 表）
"""

from typing import Optional

from sqlalchemy import Boolean, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from kanboard_mcp.database.base import Base, IntegerPrimaryKeyMixin, unix_now


class Project(IntegerPrimaryKeyMixin, Base):
    """项目"""

    __tablename__ = "projects"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True, default="")
    identifier: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    last_modified: Mapped[int] = mapped_column(Integer, nullable=False, default=unix_now)
