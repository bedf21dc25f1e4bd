"""
任务与评论服务
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from kanboard_mcp.database.base import unix_now
from kanboard_mcp.database.models import Column, Comment, Swimlane, Task
from kanboard_mcp.services.base import CommentStore, Record, TaskStore

UPDATABLE_FIELDS = ("title", "description", "column_id", "owner_id", "date_due")


class SQLTaskStore(TaskStore):
    """任务存储"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list(self, project_id: int, status_id: int) -> List[Record]:
        result = await self.db.execute(
            select(Task)
            .where(Task.project_id == project_id, Task.is_active == status_id)
            .order_by(Task.column_id, Task.position, Task.id)
        )
        return [task.to_dict() for task in result.scalars().all()]

    async def get(self, task_id: int) -> Optional[Record]:
        task = await self.db.get(Task, task_id)
        return task.to_dict() if task else None

    async def create(
        self,
        project_id: int,
        title: str,
        description: str = "",
        column_id: Optional[int] = None,
    ) -> int:
        if column_id is None:
            column_id = await self._first_column_id(project_id)
            if column_id is None:
                raise ValueError(f"Project {project_id} has no columns")

        swimlane_result = await self.db.execute(
            select(Swimlane.id)
            .where(Swimlane.project_id == project_id)
            .order_by(Swimlane.position, Swimlane.id)
            .limit(1)
        )
        now = unix_now()
        task = Task(
            project_id=project_id,
            title=title,
            description=description,
            column_id=column_id,
            swimlane_id=swimlane_result.scalar_one_or_none() or 0,
            position=await self._next_position(column_id),
            date_creation=now,
            date_modification=now,
        )
        self.db.add(task)
        await self.db.commit()
        return task.id

    async def update(self, task_id: int, values: Dict[str, Any]) -> bool:
        values = {key: value for key, value in values.items() if key in UPDATABLE_FIELDS}
        values["date_modification"] = unix_now()

        result = await self.db.execute(
            update(Task).where(Task.id == task_id).values(**values)
        )
        await self.db.commit()
        return result.rowcount > 0

    async def move(
        self,
        task_id: int,
        column_id: int,
        position: int = 1,
        project_id: Optional[int] = None,
    ) -> bool:
        task = await self.db.get(Task, task_id)
        if task is None:
            return False
        if project_id is not None and task.project_id != project_id:
            return False

        column = await self.db.get(Column, column_id)
        if column is None or column.project_id != task.project_id:
            return False

        task.column_id = column_id
        task.position = position
        task.date_modification = unix_now()
        await self.db.commit()
        return True

    async def remove(self, task_id: int) -> bool:
        result = await self.db.execute(delete(Task).where(Task.id == task_id))
        await self.db.commit()
        return result.rowcount > 0

    async def _first_column_id(self, project_id: int) -> Optional[int]:
        result = await self.db.execute(
            select(Column.id)
            .where(Column.project_id == project_id)
            .order_by(Column.position, Column.id)
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def _next_position(self, column_id: int) -> int:
        result = await self.db.execute(
            select(func.coalesce(func.max(Task.position), 0)).where(
                Task.column_id == column_id,
                Task.is_active == 1,
            )
        )
        return result.scalar_one() + 1


class SQLCommentStore(CommentStore):
    """评论存储"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list(self, task_id: int) -> List[Record]:
        result = await self.db.execute(
            select(Comment)
            .where(Comment.task_id == task_id)
            .order_by(Comment.date_creation, Comment.id)
        )
        return [comment.to_dict() for comment in result.scalars().all()]

    async def create(self, task_id: int, comment: str, user_id: int = 0) -> int:
        now = unix_now()
        row = Comment(
            task_id=task_id,
            comment=comment,
            user_id=user_id,
            date_creation=now,
            date_modification=now,
        )
        self.db.add(row)
        await self.db.commit()
        return row.id
