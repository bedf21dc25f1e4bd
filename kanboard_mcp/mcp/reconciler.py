"""
有序集合协调器

客户端提交容器（项目）内全部条目（列）的期望顺序，协调器：

1. 解析并规范化 container_id / desired_order（失败 → invalid params，不读取快照）
2. 从协作方重新读取当前顺序快照（为空或读取失败 → internal error）
3. 校验集合完全相等：missing = 快照 - 期望，unknown = 期望 - 快照，
   任一非空则整体拒绝（invalid params），不做任何修改
4. 按期望顺序逐个设置位置 1..N，每个条目一次协作方调用
5. 任一调用失败（返回假值或抛出异常）立即停止并返回 internal error
6. 全部成功返回 {"success": true}

第 4 步没有补偿回滚：中途失败时集合可能处于中间状态，
该情况会完整记录日志并以 internal error 返回给客户端
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from kanboard_mcp.core.logging import get_logger
from kanboard_mcp.mcp.protocol import InternalError, InvalidParamsError
from kanboard_mcp.mcp.validators import ArgumentError, parse_id_sequence, parse_positive_int
from kanboard_mcp.services.base import ColumnStore

logger = get_logger(__name__)


@dataclass
class ReorderPlan:
    """通过集合校验后的重排计划"""

    container_id: int
    desired_order: List[int]
    snapshot: List[int]
    assignments: List[tuple] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.assignments = [
            (item_id, position) for position, item_id in enumerate(self.desired_order, start=1)
        ]


def diff_orderings(snapshot: List[int], desired_order: List[int]) -> tuple:
    """
    比较两个 ID 集合

    Returns:
        (missing, unknown)：快照中有但请求遗漏的 ID，请求中有但快照不存在的 ID，均已排序
    """
    current = set(snapshot)
    requested = set(desired_order)
    return sorted(current - requested), sorted(requested - current)


class OrderedSetReconciler:
    """列重排协调器"""

    def __init__(self, columns: ColumnStore):
        self.columns = columns

    async def reorder(self, container_id: Any, desired_order: Any) -> Dict[str, Any]:
        """
        将客户端给出的完整顺序应用到容器

        Args:
            container_id: 项目 ID（正整数，可为整数字符串）
            desired_order: 期望顺序（列表、逗号分隔字符串或任意可迭代对象）

        Returns:
            {"success": True}

        Raises:
            InvalidParamsError: 参数不合法或 ID 集合不一致
            InternalError: 快照不可用或逐项应用中途失败
        """
        container_id, desired_order = self._parse(container_id, desired_order)
        log = logger.bind(project_id=container_id, requested_order=desired_order)

        snapshot = await self._snapshot(container_id, desired_order)
        plan = self._reconcile(container_id, desired_order, snapshot)

        await self._apply(plan)

        log.info("column_reorder_success", columns=len(plan.assignments))
        return {"success": True}

    def _parse(self, container_id: Any, desired_order: Any) -> tuple:
        try:
            return (
                parse_positive_int(container_id, "project_id"),
                parse_id_sequence(desired_order, "column_ids"),
            )
        except ArgumentError as e:
            raise InvalidParamsError(f"Invalid params: {e}") from e

    async def _snapshot(self, container_id: int, desired_order: List[int]) -> List[int]:
        try:
            rows = await self.columns.list(container_id)
        except Exception as e:
            logger.error(
                "column_reorder_snapshot_failed",
                project_id=container_id,
                requested_order=desired_order,
                error_type=type(e).__name__,
                error=str(e),
                exc_info=True,
            )
            raise InternalError() from e

        snapshot = [int(row["id"]) for row in rows or []]
        if not snapshot:
            logger.error(
                "column_reorder_empty_snapshot",
                project_id=container_id,
                requested_order=desired_order,
                snapshot=snapshot,
            )
            raise InternalError()

        return snapshot

    def _reconcile(
        self,
        container_id: int,
        desired_order: List[int],
        snapshot: List[int],
    ) -> ReorderPlan:
        missing, unknown = diff_orderings(snapshot, desired_order)
        if missing or unknown:
            logger.error(
                "column_reorder_set_mismatch",
                project_id=container_id,
                requested_order=desired_order,
                snapshot=snapshot,
                missing=missing,
                unknown=unknown,
            )
            raise InvalidParamsError(
                "Invalid params: column_ids must contain every column of project "
                f"{container_id} exactly once (missing={missing}, unknown={unknown})"
            )

        return ReorderPlan(
            container_id=container_id,
            desired_order=desired_order,
            snapshot=snapshot,
        )

    async def _apply(self, plan: ReorderPlan) -> None:
        for item_id, position in plan.assignments:
            fault: Optional[Exception] = None
            try:
                applied = await self.columns.set_position(plan.container_id, item_id, position)
            except Exception as e:
                applied = False
                fault = e

            if applied:
                continue

            logger.error(
                "column_reorder_failed",
                project_id=plan.container_id,
                requested_order=plan.desired_order,
                snapshot=plan.snapshot,
                failed_column_id=item_id,
                failed_position=position,
                error_type=type(fault).__name__ if fault else None,
                error=str(fault) if fault else None,
                exc_info=fault,
            )
            raise InternalError() from fault
