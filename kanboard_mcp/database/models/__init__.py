"""
数据库模型

所有 SQLAlchemy 模型的统一导出（表结构与 Kanboard 保持一致）
"""

from kanboard_mcp.database.models.token import McpToken
from kanboard_mcp.database.models.project import Project
from kanboard_mcp.database.models.column import Column
from kanboard_mcp.database.models.task import Task, STATUS_OPEN, STATUS_CLOSED
from kanboard_mcp.database.models.category import Category
from kanboard_mcp.database.models.swimlane import Swimlane
from kanboard_mcp.database.models.user import User
from kanboard_mcp.database.models.comment import Comment

__all__ = [
    # Gateway
    "McpToken",
    # Kanboard
    "Project",
    "Column",
    "Task",
    "STATUS_OPEN",
    "STATUS_CLOSED",
    "Category",
    "Swimlane",
    "User",
    "Comment",
]
