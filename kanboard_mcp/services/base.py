"""
引擎协作方接口

网关只通过这些窄接口访问 Kanboard 引擎的数据操作，
记录统一以字典形式返回，便于直接序列化为 JSON
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

Record = Dict[str, Any]


class TokenStore(ABC):
    """能力令牌存储（同一时间最多一个有效令牌）"""

    @abstractmethod
    async def validate(self, token: str) -> bool:
        """令牌存在且有效时返回 True"""

    @abstractmethod
    async def current_token(self) -> Optional[str]:
        """返回当前有效令牌，没有则返回 None"""

    @abstractmethod
    async def generate_token(self, name: str) -> str:
        """原子地停用所有旧令牌并写入新令牌，返回新令牌"""

    @abstractmethod
    async def list_tokens(self) -> List[Record]:
        """列出所有令牌（含已停用）"""


class ProjectStore(ABC):
    """项目"""

    @abstractmethod
    async def list(self) -> List[Record]:
        pass

    @abstractmethod
    async def create(self, name: str, description: str = "") -> int:
        pass


class TaskStore(ABC):
    """任务"""

    @abstractmethod
    async def list(self, project_id: int, status_id: int) -> List[Record]:
        pass

    @abstractmethod
    async def get(self, task_id: int) -> Optional[Record]:
        pass

    @abstractmethod
    async def create(
        self,
        project_id: int,
        title: str,
        description: str = "",
        column_id: Optional[int] = None,
    ) -> int:
        pass

    @abstractmethod
    async def update(self, task_id: int, values: Dict[str, Any]) -> bool:
        pass

    @abstractmethod
    async def move(
        self,
        task_id: int,
        column_id: int,
        position: int = 1,
        project_id: Optional[int] = None,
    ) -> bool:
        pass

    @abstractmethod
    async def remove(self, task_id: int) -> bool:
        pass


class ColumnStore(ABC):
    """看板列（有序集合，按 position 升序）"""

    @abstractmethod
    async def list(self, project_id: int) -> List[Record]:
        """按当前顺序返回项目的列"""

    @abstractmethod
    async def create(
        self,
        project_id: int,
        title: str,
        task_limit: int = 0,
        description: str = "",
    ) -> int:
        pass

    @abstractmethod
    async def update(self, column_id: int, values: Dict[str, Any]) -> bool:
        pass

    @abstractmethod
    async def remove(self, column_id: int) -> bool:
        pass

    @abstractmethod
    async def set_position(self, project_id: int, column_id: int, position: int) -> bool:
        """设置单个列的位置，成功返回 True"""


class CategoryStore(ABC):
    """任务分类"""

    @abstractmethod
    async def list(self, project_id: int) -> List[Record]:
        pass

    @abstractmethod
    async def create(self, project_id: int, name: str, description: str = "") -> int:
        pass

    @abstractmethod
    async def update(self, category_id: int, values: Dict[str, Any]) -> bool:
        pass

    @abstractmethod
    async def remove(self, category_id: int) -> bool:
        pass


class SwimlaneStore(ABC):
    """泳道"""

    @abstractmethod
    async def list(self, project_id: int) -> List[Record]:
        pass

    @abstractmethod
    async def create(self, project_id: int, name: str, description: str = "") -> int:
        pass

    @abstractmethod
    async def update(self, swimlane_id: int, values: Dict[str, Any]) -> bool:
        pass

    @abstractmethod
    async def remove(self, swimlane_id: int) -> bool:
        pass


class UserStore(ABC):
    """用户"""

    @abstractmethod
    async def list(self) -> List[Record]:
        pass


class CommentStore(ABC):
    """任务评论"""

    @abstractmethod
    async def list(self, task_id: int) -> List[Record]:
        pass

    @abstractmethod
    async def create(self, task_id: int, comment: str, user_id: int = 0) -> int:
        pass


@dataclass
class EngineStores:
    """工具调用可用的全部协作方"""

    projects: ProjectStore
    tasks: TaskStore
    columns: ColumnStore
    categories: CategoryStore
    swimlanes: SwimlaneStore
    users: UserStore
    comments: CommentStore
