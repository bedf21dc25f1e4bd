"""
SQLAlchemy 基础模型

所有数据库模型继承自此基类
"""

import time
from typing import Any, Dict

from sqlalchemy import Integer
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def unix_now() -> int:
    """当前 Unix 时间戳（秒），与 Kanboard 的时间字段一致"""
    return int(time.time())


class Base(DeclarativeBase):
    """声明式基类"""

    def to_dict(self) -> Dict[str, Any]:
        """按表字段导出为字典（用于 JSON 序列化）"""
        return {column.key: getattr(self, column.key) for column in self.__table__.columns}


class IntegerPrimaryKeyMixin:
    """自增整型主键混入类"""

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
