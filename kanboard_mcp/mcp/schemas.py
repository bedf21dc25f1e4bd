"""
工具输入 Schema 定义

每个工具的参数通过 Pydantic v2 模型解析为强类型结构，
inputSchema 由模型的 JSON Schema 生成
"""

from datetime import date
from typing import Annotated, Any, Dict, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationInfo

from kanboard_mcp.database.models import STATUS_CLOSED, STATUS_OPEN
from kanboard_mcp.mcp.validators import (
    parse_enum_int,
    parse_id_sequence,
    parse_non_negative_int,
    parse_positive_int,
    parse_required_text,
)

TASK_STATUSES = (STATUS_CLOSED, STATUS_OPEN)


def _field(info: ValidationInfo) -> str:
    return info.field_name or "value"


def _positive_id(value: Any, info: ValidationInfo) -> int:
    return parse_positive_int(value, _field(info))


def _non_negative(value: Any, info: ValidationInfo) -> int:
    return parse_non_negative_int(value, _field(info))


def _required_text(value: Any, info: ValidationInfo) -> str:
    return parse_required_text(value, _field(info))


def _id_sequence(value: Any, info: ValidationInfo) -> List[int]:
    return parse_id_sequence(value, _field(info))


def _task_status(value: Any, info: ValidationInfo) -> int:
    return parse_enum_int(value, _field(info), TASK_STATUSES)


PositiveId = Annotated[int, BeforeValidator(_positive_id)]
NonNegativeInt = Annotated[int, BeforeValidator(_non_negative)]
RequiredText = Annotated[str, BeforeValidator(_required_text)]
IdSequence = Annotated[List[int], BeforeValidator(_id_sequence)]
TaskStatus = Annotated[int, BeforeValidator(_task_status)]


class ToolInput(BaseModel):
    """工具输入基类，忽略未声明的参数"""

    model_config = ConfigDict(extra="ignore")

    def changes(self, *fields: str) -> Dict[str, Any]:
        """返回调用方实际提供的可选字段"""
        return {
            name: getattr(self, name)
            for name in fields
            if name in self.model_fields_set and getattr(self, name) is not None
        }


# ============================================================
# 项目
# ============================================================

class EmptyInput(ToolInput):
    """无参数工具"""


class CreateProjectInput(ToolInput):
    """create_project 输入"""

    name: RequiredText = Field(..., description="Project name")
    description: Optional[str] = Field(None, description="Project description")


class ProjectIdInput(ToolInput):
    """只需要 project_id 的工具"""

    project_id: PositiveId = Field(..., description="Project ID")


# ============================================================
# 任务
# ============================================================

class GetTasksInput(ToolInput):
    """get_tasks 输入"""

    project_id: PositiveId = Field(..., description="Project ID")
    status_id: TaskStatus = Field(
        STATUS_OPEN,
        description="Task status: 1 for open tasks, 0 for closed tasks",
        json_schema_extra={"enum": list(TASK_STATUSES)},
    )


class CreateTaskInput(ToolInput):
    """create_task 输入"""

    project_id: PositiveId = Field(..., description="Project ID")
    title: RequiredText = Field(..., description="Task title")
    description: Optional[str] = Field(None, description="Task description")
    column_id: Optional[PositiveId] = Field(None, description="Column ID")


class UpdateTaskInput(ToolInput):
    """update_task 输入"""

    task_id: PositiveId = Field(..., description="Task ID")
    title: Optional[RequiredText] = Field(None, description="Task title")
    description: Optional[str] = Field(None, description="Task description")
    column_id: Optional[PositiveId] = Field(None, description="Column ID")


class MoveTaskInput(ToolInput):
    """move_task 输入"""

    task_id: PositiveId = Field(..., description="Task ID")
    column_id: PositiveId = Field(..., description="Target column ID")
    project_id: Optional[PositiveId] = Field(None, description="Project ID")
    position: PositiveId = Field(1, description="Position inside the target column")


class TaskIdInput(ToolInput):
    """只需要 task_id 的工具"""

    task_id: PositiveId = Field(..., description="Task ID")


class AssignTaskInput(ToolInput):
    """assign_task 输入"""

    task_id: PositiveId = Field(..., description="Task ID")
    user_id: PositiveId = Field(..., description="User ID")


class SetTaskDueDateInput(ToolInput):
    """set_task_due_date 输入"""

    task_id: PositiveId = Field(..., description="Task ID")
    due_date: date = Field(..., description="Due date in YYYY-MM-DD format")


class AddTaskCommentInput(ToolInput):
    """add_task_comment 输入"""

    task_id: PositiveId = Field(..., description="Task ID")
    comment: RequiredText = Field(..., description="Comment text")
    user_id: NonNegativeInt = Field(0, description="Author user ID (0 for system)")


# ============================================================
# 列
# ============================================================

class CreateColumnInput(ToolInput):
    """create_column 输入"""

    project_id: PositiveId = Field(..., description="Project ID")
    title: RequiredText = Field(..., description="Column title")
    task_limit: NonNegativeInt = Field(0, description="Task limit (0 for unlimited)")
    description: Optional[str] = Field(None, description="Column description")


class UpdateColumnInput(ToolInput):
    """update_column 输入"""

    column_id: PositiveId = Field(..., description="Column ID")
    title: Optional[RequiredText] = Field(None, description="Column title")
    task_limit: Optional[NonNegativeInt] = Field(None, description="Task limit (0 for unlimited)")
    description: Optional[str] = Field(None, description="Column description")


class ColumnIdInput(ToolInput):
    """只需要 column_id 的工具"""

    column_id: PositiveId = Field(..., description="Column ID")


class ReorderColumnsInput(ToolInput):
    """reorder_columns 输入"""

    project_id: PositiveId = Field(..., description="Project ID")
    column_ids: IdSequence = Field(
        ...,
        description="Every column ID of the project, in the desired order",
    )


# ============================================================
# 分类 / 泳道
# ============================================================

class CreateCategoryInput(ToolInput):
    """create_category 输入"""

    project_id: PositiveId = Field(..., description="Project ID")
    name: RequiredText = Field(..., description="Category name")
    description: Optional[str] = Field(None, description="Category description")


class UpdateCategoryInput(ToolInput):
    """update_category 输入"""

    category_id: PositiveId = Field(..., description="Category ID")
    name: Optional[RequiredText] = Field(None, description="Category name")
    description: Optional[str] = Field(None, description="Category description")


class CategoryIdInput(ToolInput):
    """只需要 category_id 的工具"""

    category_id: PositiveId = Field(..., description="Category ID")


class CreateSwimlaneInput(ToolInput):
    """create_swimlane 输入"""

    project_id: PositiveId = Field(..., description="Project ID")
    name: RequiredText = Field(..., description="Swimlane name")
    description: Optional[str] = Field(None, description="Swimlane description")


class UpdateSwimlaneInput(ToolInput):
    """update_swimlane 输入"""

    swimlane_id: PositiveId = Field(..., description="Swimlane ID")
    name: Optional[RequiredText] = Field(None, description="Swimlane name")
    description: Optional[str] = Field(None, description="Swimlane description")


class SwimlaneIdInput(ToolInput):
    """只需要 swimlane_id 的工具"""

    swimlane_id: PositiveId = Field(..., description="Swimlane ID")
