"""
工具执行器

负责 tools/call：查找工具、解析参数、调用协作方、包装结果
"""

import json
import time
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Optional

from pydantic import ValidationError

from kanboard_mcp.core.logging import get_logger
from kanboard_mcp.mcp.protocol import InvalidParamsError, MethodNotFoundError
from kanboard_mcp.mcp.reconciler import OrderedSetReconciler
from kanboard_mcp.mcp.registry import ToolName, ToolRegistry, get_tool_registry
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
from kanboard_mcp.mcp.validators import ArgumentError
from kanboard_mcp.services.base import EngineStores

logger = get_logger(__name__)

ToolHandler = Callable[[Any], Awaitable[Any]]


def text_content(payload: Any) -> Dict[str, Any]:
    """将结构化数据包装为单个 text 内容块"""
    return {
        "content": [
            {
                "type": "text",
                "text": json.dumps(payload, indent=2, ensure_ascii=False, default=str),
            }
        ]
    }


def format_validation_error(error: ValidationError) -> str:
    """将 pydantic 校验错误转为一行可读信息"""
    parts = []
    for item in error.errors():
        cause = (item.get("ctx") or {}).get("error")
        if isinstance(cause, ArgumentError):
            parts.append(str(cause))
            continue
        location = ".".join(str(part) for part in item.get("loc", ())) or "arguments"
        parts.append(f"{location}: {item.get('msg')}")
    return "Invalid params: " + "; ".join(parts)


def date_to_timestamp(value: Any) -> int:
    """YYYY-MM-DD → 当天 00:00 UTC 的 Unix 时间戳"""
    return int(datetime(value.year, value.month, value.day, tzinfo=timezone.utc).timestamp())


class ToolExecutor:
    """工具执行器"""

    def __init__(self, stores: EngineStores, registry: Optional[ToolRegistry] = None):
        self.stores = stores
        self.registry = registry or get_tool_registry()
        self.reconciler = OrderedSetReconciler(stores.columns)
        self._handlers: Dict[str, ToolHandler] = {
            ToolName.GET_PROJECTS.value: self._handle_get_projects,
            ToolName.CREATE_PROJECT.value: self._handle_create_project,
            ToolName.GET_TASKS.value: self._handle_get_tasks,
            ToolName.CREATE_TASK.value: self._handle_create_task,
            ToolName.UPDATE_TASK.value: self._handle_update_task,
            ToolName.GET_COLUMNS.value: self._handle_get_columns,
            ToolName.MOVE_TASK.value: self._handle_move_task,
            ToolName.GET_TASK_DETAILS.value: self._handle_get_task_details,
            ToolName.DELETE_TASK.value: self._handle_delete_task,
            ToolName.ASSIGN_TASK.value: self._handle_assign_task,
            ToolName.SET_TASK_DUE_DATE.value: self._handle_set_task_due_date,
            ToolName.ADD_TASK_COMMENT.value: self._handle_add_task_comment,
            ToolName.GET_USERS.value: self._handle_get_users,
            ToolName.GET_TASK_COMMENTS.value: self._handle_get_task_comments,
            ToolName.CREATE_COLUMN.value: self._handle_create_column,
            ToolName.UPDATE_COLUMN.value: self._handle_update_column,
            ToolName.DELETE_COLUMN.value: self._handle_delete_column,
            ToolName.REORDER_COLUMNS.value: self._handle_reorder_columns,
            ToolName.CREATE_CATEGORY.value: self._handle_create_category,
            ToolName.UPDATE_CATEGORY.value: self._handle_update_category,
            ToolName.DELETE_CATEGORY.value: self._handle_delete_category,
            ToolName.GET_CATEGORIES.value: self._handle_get_categories,
            ToolName.CREATE_SWIMLANE.value: self._handle_create_swimlane,
            ToolName.UPDATE_SWIMLANE.value: self._handle_update_swimlane,
            ToolName.DELETE_SWIMLANE.value: self._handle_delete_swimlane,
            ToolName.GET_SWIMLANES.value: self._handle_get_swimlanes,
        }

        unhandled = set(self.registry.names()) ^ set(self._handlers)
        if unhandled:
            raise RuntimeError(f"Tool registry and handlers out of sync: {sorted(unhandled)}")

    async def call(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """
        执行 tools/call

        1. 查找工具（未知 → method not found）
        2. 解析参数（不合法 → invalid params，不触碰协作方）
        3. 调用协作方并包装为 text 内容块
        """
        name = params.get("name")
        tool = self.registry.get(name)
        if tool is None:
            raise MethodNotFoundError(f"Tool not found: {name}")

        arguments = params.get("arguments")
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, dict):
            raise InvalidParamsError("Invalid params: arguments must be an object")

        validated_input = self.parse_arguments(tool.input_schema, arguments)

        log = logger.bind(tool_name=tool.name.value, tool_category=tool.category)
        log.info("tool_call_start", mutates=tool.mutates)
        start_time = time.time()

        output = await self._handlers[tool.name.value](validated_input)

        latency_ms = int((time.time() - start_time) * 1000)
        log.info("tool_call_success", latency_ms=latency_ms)
        return text_content(output)

    @staticmethod
    def parse_arguments(schema: type, arguments: Dict[str, Any]) -> ToolInput:
        """按工具输入模型解析参数"""
        try:
            return schema.model_validate(arguments)
        except ValidationError as e:
            raise InvalidParamsError(format_validation_error(e)) from e
        except ArgumentError as e:
            raise InvalidParamsError(f"Invalid params: {e}") from e

    # ============================================================
    # 项目 / 用户
    # ============================================================

    async def _handle_get_projects(self, input: EmptyInput) -> Any:
        return await self.stores.projects.list()

    async def _handle_create_project(self, input: CreateProjectInput) -> Any:
        project_id = await self.stores.projects.create(input.name, input.description or "")
        return {"project_id": project_id}

    async def _handle_get_users(self, input: EmptyInput) -> Any:
        return await self.stores.users.list()

    # ============================================================
    # 任务
    # ============================================================

    async def _handle_get_tasks(self, input: GetTasksInput) -> Any:
        return await self.stores.tasks.list(input.project_id, input.status_id)

    async def _handle_create_task(self, input: CreateTaskInput) -> Any:
        task_id = await self.stores.tasks.create(
            input.project_id,
            input.title,
            description=input.description or "",
            column_id=input.column_id,
        )
        return {"task_id": task_id}

    async def _handle_update_task(self, input: UpdateTaskInput) -> Any:
        success = await self.stores.tasks.update(
            input.task_id,
            input.changes("title", "description", "column_id"),
        )
        return {"success": bool(success)}

    async def _handle_move_task(self, input: MoveTaskInput) -> Any:
        success = await self.stores.tasks.move(
            input.task_id,
            input.column_id,
            position=input.position,
            project_id=input.project_id,
        )
        return {"success": bool(success)}

    async def _handle_get_task_details(self, input: TaskIdInput) -> Any:
        task = await self.stores.tasks.get(input.task_id)
        if task is None:
            raise InvalidParamsError(f"Task not found: {input.task_id}")
        return task

    async def _handle_delete_task(self, input: TaskIdInput) -> Any:
        return {"success": bool(await self.stores.tasks.remove(input.task_id))}

    async def _handle_assign_task(self, input: AssignTaskInput) -> Any:
        success = await self.stores.tasks.update(input.task_id, {"owner_id": input.user_id})
        return {"success": bool(success)}

    async def _handle_set_task_due_date(self, input: SetTaskDueDateInput) -> Any:
        success = await self.stores.tasks.update(
            input.task_id,
            {"date_due": date_to_timestamp(input.due_date)},
        )
        return {"success": bool(success)}

    async def _handle_add_task_comment(self, input: AddTaskCommentInput) -> Any:
        comment_id = await self.stores.comments.create(
            input.task_id,
            input.comment,
            user_id=input.user_id,
        )
        return {"comment_id": comment_id}

    async def _handle_get_task_comments(self, input: TaskIdInput) -> Any:
        return await self.stores.comments.list(input.task_id)

    # ============================================================
    # 列
    # ============================================================

    async def _handle_get_columns(self, input: ProjectIdInput) -> Any:
        return await self.stores.columns.list(input.project_id)

    async def _handle_create_column(self, input: CreateColumnInput) -> Any:
        column_id = await self.stores.columns.create(
            input.project_id,
            input.title,
            task_limit=input.task_limit,
            description=input.description or "",
        )
        return {"column_id": column_id}

    async def _handle_update_column(self, input: UpdateColumnInput) -> Any:
        success = await self.stores.columns.update(
            input.column_id,
            input.changes("title", "task_limit", "description"),
        )
        return {"success": bool(success)}

    async def _handle_delete_column(self, input: ColumnIdInput) -> Any:
        return {"success": bool(await self.stores.columns.remove(input.column_id))}

    async def _handle_reorder_columns(self, input: ReorderColumnsInput) -> Any:
        return await self.reconciler.reorder(input.project_id, input.column_ids)

    # ============================================================
    # 分类
    # ============================================================

    async def _handle_create_category(self, input: CreateCategoryInput) -> Any:
        category_id = await self.stores.categories.create(
            input.project_id,
            input.name,
            description=input.description or "",
        )
        return {"category_id": category_id}

    async def _handle_update_category(self, input: UpdateCategoryInput) -> Any:
        success = await self.stores.categories.update(
            input.category_id,
            input.changes("name", "description"),
        )
        return {"success": bool(success)}

    async def _handle_delete_category(self, input: CategoryIdInput) -> Any:
        return {"success": bool(await self.stores.categories.remove(input.category_id))}

    async def _handle_get_categories(self, input: ProjectIdInput) -> Any:
        return await self.stores.categories.list(input.project_id)

    # ============================================================
    # 泳道
    # ============================================================

    async def _handle_create_swimlane(self, input: CreateSwimlaneInput) -> Any:
        swimlane_id = await self.stores.swimlanes.create(
            input.project_id,
            input.name,
            description=input.description or "",
        )
        return {"swimlane_id": swimlane_id}

    async def _handle_update_swimlane(self, input: UpdateSwimlaneInput) -> Any:
        success = await self.stores.swimlanes.update(
            input.swimlane_id,
            input.changes("name", "description"),
        )
        return {"success": bool(success)}

    async def _handle_delete_swimlane(self, input: SwimlaneIdInput) -> Any:
        return {"success": bool(await self.stores.swimlanes.remove(input.swimlane_id))}

    async def _handle_get_swimlanes(self, input: ProjectIdInput) -> Any:
        return await self.stores.swimlanes.list(input.project_id)
