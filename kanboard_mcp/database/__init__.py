"""
数据库模块

提供 SQLAlchemy 2.0 异步数据库支持
"""

from kanboard_mcp.database.base import Base, IntegerPrimaryKeyMixin, unix_now
from kanboard_mcp.database.engine import (
    engine,
    async_session_maker,
    get_db,
    init_db,
    close_db,
)

__all__ = [
    # Base
    "Base",
    "IntegerPrimaryKeyMixin",
    "unix_now",
    # Engine
    "engine",
    "async_session_maker",
    "get_db",
    "init_db",
    "close_db",
]
