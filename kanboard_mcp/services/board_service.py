"""
分类与泳道服务
"""

from typing import Any, Dict, List

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from kanboard_mcp.database.models import Category, Swimlane
from kanboard_mcp.services.base import CategoryStore, Record, SwimlaneStore

UPDATABLE_FIELDS = ("name", "description")


def _updatable(values: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in values.items() if key in UPDATABLE_FIELDS}


class SQLCategoryStore(CategoryStore):
    """分类存储"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list(self, project_id: int) -> List[Record]:
        result = await self.db.execute(
            select(Category)
            .where(Category.project_id == project_id)
            .order_by(Category.name)
        )
        return [category.to_dict() for category in result.scalars().all()]

    async def create(self, project_id: int, name: str, description: str = "") -> int:
        category = Category(project_id=project_id, name=name, description=description)
        self.db.add(category)
        await self.db.commit()
        return category.id

    async def update(self, category_id: int, values: Dict[str, Any]) -> bool:
        values = _updatable(values)
        if not values:
            return await self.db.get(Category, category_id) is not None

        result = await self.db.execute(
            update(Category).where(Category.id == category_id).values(**values)
        )
        await self.db.commit()
        return result.rowcount > 0

    async def remove(self, category_id: int) -> bool:
        result = await self.db.execute(delete(Category).where(Category.id == category_id))
        await self.db.commit()
        return result.rowcount > 0


class SQLSwimlaneStore(SwimlaneStore):
    """泳道存储"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list(self, project_id: int) -> List[Record]:
        result = await self.db.execute(
            select(Swimlane)
            .where(Swimlane.project_id == project_id)
            .order_by(Swimlane.position, Swimlane.id)
        )
        return [swimlane.to_dict() for swimlane in result.scalars().all()]

    async def create(self, project_id: int, name: str, description: str = "") -> int:
        result = await self.db.execute(
            select(func.coalesce(func.max(Swimlane.position), 0)).where(
                Swimlane.project_id == project_id
            )
        )
        swimlane = Swimlane(
            project_id=project_id,
            name=name,
            description=description,
            position=result.scalar_one() + 1,
        )
        self.db.add(swimlane)
        await self.db.commit()
        return swimlane.id

    async def update(self, swimlane_id: int, values: Dict[str, Any]) -> bool:
        values = _updatable(values)
        if not values:
            return await self.db.get(Swimlane, swimlane_id) is not None

        result = await self.db.execute(
            update(Swimlane).where(Swimlane.id == swimlane_id).values(**values)
        )
        await self.db.commit()
        return result.rowcount > 0

    async def remove(self, swimlane_id: int) -> bool:
        result = await self.db.execute(delete(Swimlane).where(Swimlane.id == swimlane_id))
        await self.db.commit()
        return result.rowcount > 0
