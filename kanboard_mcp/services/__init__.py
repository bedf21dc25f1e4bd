"""
引擎协作方服务

抽象接口定义在 base.py，基于 SQLAlchemy 的实现按实体拆分
"""

from sqlalchemy.ext.asyncio import AsyncSession

from kanboard_mcp.services.base import (
    CategoryStore,
    ColumnStore,
    CommentStore,
    EngineStores,
    ProjectStore,
    Record,
    SwimlaneStore,
    TaskStore,
    TokenStore,
    UserStore,
)
from kanboard_mcp.services.board_service import SQLCategoryStore, SQLSwimlaneStore
from kanboard_mcp.services.column_service import SQLColumnStore
from kanboard_mcp.services.project_service import SQLProjectStore, SQLUserStore
from kanboard_mcp.services.task_service import SQLCommentStore, SQLTaskStore
from kanboard_mcp.services.token_service import SQLTokenStore


def build_engine_stores(db: AsyncSession) -> EngineStores:
    """基于同一个数据库会话构建全部协作方"""
    return EngineStores(
        projects=SQLProjectStore(db),
        tasks=SQLTaskStore(db),
        columns=SQLColumnStore(db),
        categories=SQLCategoryStore(db),
        swimlanes=SQLSwimlaneStore(db),
        users=SQLUserStore(db),
        comments=SQLCommentStore(db),
    )


__all__ = [
    # Interfaces
    "Record",
    "TokenStore",
    "ProjectStore",
    "TaskStore",
    "ColumnStore",
    "CategoryStore",
    "SwimlaneStore",
    "UserStore",
    "CommentStore",
    "EngineStores",
    # SQL implementations
    "SQLTokenStore",
    "SQLProjectStore",
    "SQLTaskStore",
    "SQLColumnStore",
    "SQLCategoryStore",
    "SQLSwimlaneStore",
    "SQLUserStore",
    "SQLCommentStore",
    "build_engine_stores",
]
