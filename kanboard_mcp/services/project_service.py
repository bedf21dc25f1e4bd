"""
项目与用户服务

只读查询为主，创建项目时同时创建 Kanboard 默认的四个列
"""

from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from kanboard_mcp.database.base import unix_now
from kanboard_mcp.database.models import Column, Project, Swimlane, User
from kanboard_mcp.services.base import ProjectStore, Record, UserStore

DEFAULT_COLUMNS = ("Backlog", "Ready", "Work in progress", "Done")
DEFAULT_SWIMLANE = "Default swimlane"


class SQLProjectStore(ProjectStore):
    """项目存储"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list(self) -> List[Record]:
        result = await self.db.execute(select(Project).order_by(Project.name))
        return [project.to_dict() for project in result.scalars().all()]

    async def create(self, name: str, description: str = "") -> int:
        project = Project(
            name=name,
            description=description,
            last_modified=unix_now(),
        )
        self.db.add(project)
        await self.db.flush()

        for position, title in enumerate(DEFAULT_COLUMNS, start=1):
            self.db.add(Column(project_id=project.id, title=title, position=position))
        self.db.add(Swimlane(project_id=project.id, name=DEFAULT_SWIMLANE, position=1))

        await self.db.commit()
        return project.id


class SQLUserStore(UserStore):
    """用户存储"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list(self) -> List[Record]:
        result = await self.db.execute(select(User).order_by(User.username))
        return [user.to_dict() for user in result.scalars().all()]
