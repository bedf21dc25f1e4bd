"""
工具注册表

静态工具目录：工具名 → 描述 + 输入 schema。
注册表在构造时一次性建立，运行期不可修改；tools/list 按声明顺序输出
"""

from enum import Enum
from functools import lru_cache
from types import MappingProxyType
from typing import Any, Dict, List, Optional, Tuple, Type

from kanboard_mcp.mcp.schemas import (
    AddTaskCommentInput,
    AssignTaskInput,
    CategoryIdInput,
    ColumnIdInput,
    CreateCategoryInput,
    CreateColumnInput,
    CreateProjectInput,
    CreateSwimlaneInput,
    CreateTaskInput,
    EmptyInput,
    GetTasksInput,
    MoveTaskInput,
    ProjectIdInput,
    ReorderColumnsInput,
    SetTaskDueDateInput,
    SwimlaneIdInput,
    TaskIdInput,
    ToolInput,
    UpdateCategoryInput,
    UpdateColumnInput,
    UpdateSwimlaneInput,
    UpdateTaskInput,
)


class ToolName(str, Enum):
    """全部工具名（封闭集合）"""

    GET_PROJECTS = "get_projects"
    CREATE_PROJECT = "create_project"
    GET_TASKS = "get_tasks"
    CREATE_TASK = "create_task"
    UPDATE_TASK = "update_task"
    GET_COLUMNS = "get_columns"
    MOVE_TASK = "move_task"
    GET_TASK_DETAILS = "get_task_details"
    DELETE_TASK = "delete_task"
    ASSIGN_TASK = "assign_task"
    SET_TASK_DUE_DATE = "set_task_due_date"
    ADD_TASK_COMMENT = "add_task_comment"
    GET_USERS = "get_users"
    GET_TASK_COMMENTS = "get_task_comments"
    CREATE_COLUMN = "create_column"
    UPDATE_COLUMN = "update_column"
    DELETE_COLUMN = "delete_column"
    REORDER_COLUMNS = "reorder_columns"
    CREATE_CATEGORY = "create_category"
    UPDATE_CATEGORY = "update_category"
    DELETE_CATEGORY = "delete_category"
    GET_CATEGORIES = "get_categories"
    CREATE_SWIMLANE = "create_swimlane"
    UPDATE_SWIMLANE = "update_swimlane"
    DELETE_SWIMLANE = "delete_swimlane"
    GET_SWIMLANES = "get_swimlanes"


class ToolDefinition:
    """工具定义"""

    def __init__(
        self,
        name: ToolName,
        description: str,
        category: str,
        input_schema: Type[ToolInput],
        mutates: bool = False,
    ):
        self.name = name
        self.description = description
        self.category = category
        self.input_schema = input_schema
        self.mutates = mutates

    def json_schema(self) -> Dict[str, Any]:
        """输入参数的 JSON Schema"""
        schema = self.input_schema.model_json_schema()
        schema.setdefault("type", "object")
        schema.setdefault("properties", {})
        return schema

    def to_descriptor(self) -> Dict[str, Any]:
        """转换为 MCP 工具描述"""
        return {
            "name": self.name.value,
            "description": self.description,
            "inputSchema": self.json_schema(),
        }


BUILTIN_TOOLS: Tuple[ToolDefinition, ...] = (
    # 项目与任务
    ToolDefinition(ToolName.GET_PROJECTS, "Get all projects", "project", EmptyInput),
    ToolDefinition(
        ToolName.CREATE_PROJECT, "Create a new project", "project", CreateProjectInput, mutates=True
    ),
    ToolDefinition(
        ToolName.GET_TASKS,
        "Get tasks from a project (open tasks by default, status_id=0 for closed tasks)",
        "task",
        GetTasksInput,
    ),
    ToolDefinition(ToolName.CREATE_TASK, "Create a new task", "task", CreateTaskInput, mutates=True),
    ToolDefinition(
        ToolName.UPDATE_TASK, "Update an existing task", "task", UpdateTaskInput, mutates=True
    ),
    ToolDefinition(ToolName.GET_COLUMNS, "Get columns for a project", "column", ProjectIdInput),
    ToolDefinition(
        ToolName.MOVE_TASK, "Move a task to a different column", "task", MoveTaskInput, mutates=True
    ),
    ToolDefinition(
        ToolName.GET_TASK_DETAILS,
        "Get detailed information about a specific task",
        "task",
        TaskIdInput,
    ),
    ToolDefinition(ToolName.DELETE_TASK, "Delete a task", "task", TaskIdInput, mutates=True),
    ToolDefinition(
        ToolName.ASSIGN_TASK, "Assign a task to a user", "task", AssignTaskInput, mutates=True
    ),
    ToolDefinition(
        ToolName.SET_TASK_DUE_DATE,
        "Set due date for a task",
        "task",
        SetTaskDueDateInput,
        mutates=True,
    ),
    ToolDefinition(
        ToolName.ADD_TASK_COMMENT,
        "Add a comment to a task",
        "comment",
        AddTaskCommentInput,
        mutates=True,
    ),
    ToolDefinition(ToolName.GET_USERS, "Get all users in the system", "user", EmptyInput),
    ToolDefinition(
        ToolName.GET_TASK_COMMENTS, "Get all comments for a task", "comment", TaskIdInput
    ),
    # 管理工具 - 列
    ToolDefinition(
        ToolName.CREATE_COLUMN, "Add new columns to projects", "column", CreateColumnInput, mutates=True
    ),
    ToolDefinition(
        ToolName.UPDATE_COLUMN, "Modify column settings", "column", UpdateColumnInput, mutates=True
    ),
    ToolDefinition(ToolName.DELETE_COLUMN, "Remove columns", "column", ColumnIdInput, mutates=True),
    ToolDefinition(
        ToolName.REORDER_COLUMNS,
        "Change column positions. column_ids must list every column of the project "
        "exactly once, in the desired order",
        "column",
        ReorderColumnsInput,
        mutates=True,
    ),
    # 管理工具 - 分类
    ToolDefinition(
        ToolName.CREATE_CATEGORY, "Add task categories", "category", CreateCategoryInput, mutates=True
    ),
    ToolDefinition(
        ToolName.UPDATE_CATEGORY, "Modify categories", "category", UpdateCategoryInput, mutates=True
    ),
    ToolDefinition(
        ToolName.DELETE_CATEGORY, "Remove categories", "category", CategoryIdInput, mutates=True
    ),
    ToolDefinition(ToolName.GET_CATEGORIES, "List project categories", "category", ProjectIdInput),
    # 管理工具 - 泳道
    ToolDefinition(
        ToolName.CREATE_SWIMLANE, "Add swimlanes", "swimlane", CreateSwimlaneInput, mutates=True
    ),
    ToolDefinition(
        ToolName.UPDATE_SWIMLANE, "Modify swimlanes", "swimlane", UpdateSwimlaneInput, mutates=True
    ),
    ToolDefinition(
        ToolName.DELETE_SWIMLANE, "Remove swimlanes", "swimlane", SwimlaneIdInput, mutates=True
    ),
    ToolDefinition(ToolName.GET_SWIMLANES, "List project swimlanes", "swimlane", ProjectIdInput),
)


class ToolRegistry:
    """工具注册表（只读）"""

    def __init__(self, tools: Tuple[ToolDefinition, ...] = BUILTIN_TOOLS):
        registered: Dict[str, ToolDefinition] = {}
        for tool in tools:
            if tool.name.value in registered:
                raise ValueError(f"Duplicate tool name: {tool.name.value}")
            registered[tool.name.value] = tool
        self._tools = MappingProxyType(registered)

    def get(self, name: Any) -> Optional[ToolDefinition]:
        """获取工具定义，未注册返回 None"""
        if not isinstance(name, str):
            return None
        return self._tools.get(name)

    def names(self) -> List[str]:
        """按声明顺序返回工具名"""
        return list(self._tools)

    def list_descriptors(self) -> List[Dict[str, Any]]:
        """列出所有工具描述（tools/list 输出）"""
        return [tool.to_descriptor() for tool in self._tools.values()]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name in self._tools

    def __len__(self) -> int:
        return len(self._tools)


@lru_cache
def get_tool_registry() -> ToolRegistry:
    """获取工具注册表单例"""
    return ToolRegistry()
