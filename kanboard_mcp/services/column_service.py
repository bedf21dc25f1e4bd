"""
看板列服务

列在项目内按 position 升序排列；set_position 只修改单个列，
整体重排由 MCP 层的有序集合协调器逐个调用完成
"""

from typing import Any, Dict, List

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from kanboard_mcp.database.models import Column
from kanboard_mcp.services.base import ColumnStore, Record

UPDATABLE_FIELDS = ("title", "task_limit", "description")


class SQLColumnStore(ColumnStore):
    """看板列存储"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list(self, project_id: int) -> List[Record]:
        result = await self.db.execute(
            select(Column)
            .where(Column.project_id == project_id)
            .order_by(Column.position, Column.id)
        )
        return [column.to_dict() for column in result.scalars().all()]

    async def create(
        self,
        project_id: int,
        title: str,
        task_limit: int = 0,
        description: str = "",
    ) -> int:
        result = await self.db.execute(
            select(func.coalesce(func.max(Column.position), 0)).where(
                Column.project_id == project_id
            )
        )
        column = Column(
            project_id=project_id,
            title=title,
            position=result.scalar_one() + 1,
            task_limit=task_limit,
            description=description,
        )
        self.db.add(column)
        await self.db.commit()
        return column.id

    async def update(self, column_id: int, values: Dict[str, Any]) -> bool:
        values = {key: value for key, value in values.items() if key in UPDATABLE_FIELDS}
        if not values:
            return await self.db.get(Column, column_id) is not None

        result = await self.db.execute(
            update(Column).where(Column.id == column_id).values(**values)
        )
        await self.db.commit()
        return result.rowcount > 0

    async def remove(self, column_id: int) -> bool:
        result = await self.db.execute(delete(Column).where(Column.id == column_id))
        await self.db.commit()
        return result.rowcount > 0

    async def set_position(self, project_id: int, column_id: int, position: int) -> bool:
        result = await self.db.execute(
            update(Column)
            .where(Column.id == column_id, Column.project_id == project_id)
            .values(position=position)
        )
        await self.db.commit()
        return result.rowcount == 1
