"""
用户模型（Kanboard users 表）
"""

from typing import Optional

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from kanboard_mcp.database.base import Base, IntegerPrimaryKeyMixin


class User(IntegerPrimaryKeyMixin, Base):
    """用户"""

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    role: Mapped[str] = mapped_column(String(25), nullable=False, default="app-user")
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
