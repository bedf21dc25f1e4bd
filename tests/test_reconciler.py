"""
列重排协调器测试

覆盖集合校验、逐项应用的快速失败，以及失败时的日志上下文
"""

from unittest.mock import AsyncMock, call

import pytest
from structlog.testing import capture_logs

from kanboard_mcp.mcp.protocol import InternalError, InvalidParamsError
from kanboard_mcp.mcp.reconciler import OrderedSetReconciler, ReorderPlan, diff_orderings
from kanboard_mcp.services.base import ColumnStore


def make_columns(ids):
    columns = AsyncMock(spec=ColumnStore)
    columns.list.return_value = [{"id": column_id, "title": f"C{column_id}"} for column_id in ids]
    columns.set_position.return_value = True
    return columns


def test_diff_orderings():
    assert diff_orderings([1, 2, 3], [1, 2, 4]) == ([3], [4])
    assert diff_orderings([1, 2], [2, 1]) == ([], [])


def test_plan_assigns_positions_from_one():
    plan = ReorderPlan(container_id=1, desired_order=[30, 10, 20], snapshot=[10, 20, 30])
    assert plan.assignments == [(30, 1), (10, 2), (20, 3)]


class TestOrderedSetReconciler:
    """重排协议"""

    @pytest.mark.asyncio
    async def test_reorder_success(self):
        columns = make_columns([1, 2, 3])
        reconciler = OrderedSetReconciler(columns)

        result = await reconciler.reorder(5, [3, 1, 2])

        assert result == {"success": True}
        columns.list.assert_awaited_once_with(5)
        assert columns.set_position.await_args_list == [
            call(5, 3, 1),
            call(5, 1, 2),
            call(5, 2, 3),
        ]

    @pytest.mark.asyncio
    async def test_accepts_string_inputs(self):
        columns = make_columns([1, 2])
        reconciler = OrderedSetReconciler(columns)

        await reconciler.reorder("5", "2,1")

        assert columns.set_position.await_args_list == [call(5, 2, 1), call(5, 1, 2)]

    @pytest.mark.asyncio
    async def test_set_mismatch_rejected_without_mutation(self):
        columns = make_columns([1, 2, 3])
        reconciler = OrderedSetReconciler(columns)

        with capture_logs() as logs:
            with pytest.raises(InvalidParamsError) as exc_info:
                await reconciler.reorder(5, [1, 2, 4])

        assert "missing=[3]" in exc_info.value.message
        assert "unknown=[4]" in exc_info.value.message
        columns.set_position.assert_not_awaited()
        assert logs[0]["event"] == "column_reorder_set_mismatch"

    @pytest.mark.asyncio
    async def test_subset_rejected(self):
        columns = make_columns([1, 2, 3])

        with pytest.raises(InvalidParamsError, match=r"missing=\[2\]"):
            await OrderedSetReconciler(columns).reorder(5, [3, 1])

        columns.set_position.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_duplicates_rejected_before_snapshot(self):
        columns = make_columns([1, 2])

        with pytest.raises(InvalidParamsError, match="duplicate ids"):
            await OrderedSetReconciler(columns).reorder(5, [1, 1, 2])

        columns.list.assert_not_awaited()
        columns.set_position.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_bad_project_id_rejected_before_snapshot(self):
        columns = make_columns([1])

        with pytest.raises(InvalidParamsError, match="project_id"):
            await OrderedSetReconciler(columns).reorder(0, [1])

        columns.list.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_mid_sequence_failure_stops_and_logs(self):
        columns = make_columns([1, 2, 3])
        columns.set_position.side_effect = [True, False, True]
        reconciler = OrderedSetReconciler(columns)

        with capture_logs() as logs:
            with pytest.raises(InternalError) as exc_info:
                await reconciler.reorder(5, [3, 1, 2])

        assert exc_info.value.message == "Internal error"
        assert columns.set_position.await_count == 2

        failures = [entry for entry in logs if entry["event"] == "column_reorder_failed"]
        assert len(failures) == 1
        assert failures[0]["project_id"] == 5
        assert failures[0]["requested_order"] == [3, 1, 2]
        assert failures[0]["snapshot"] == [1, 2, 3]
        assert failures[0]["failed_column_id"] == 1
        assert failures[0]["failed_position"] == 2
        assert failures[0]["log_level"] == "error"

    @pytest.mark.asyncio
    async def test_collaborator_exception_is_internal_error(self):
        columns = make_columns([1, 2])
        columns.set_position.side_effect = RuntimeError("database is locked")

        with capture_logs() as logs:
            with pytest.raises(InternalError) as exc_info:
                await OrderedSetReconciler(columns).reorder(5, [2, 1])

        assert "database is locked" not in exc_info.value.message
        assert columns.set_position.await_count == 1
        failure = next(entry for entry in logs if entry["event"] == "column_reorder_failed")
        assert failure["error_type"] == "RuntimeError"
        assert failure["failed_column_id"] == 2
        assert failure["failed_position"] == 1

    @pytest.mark.asyncio
    async def test_empty_snapshot_is_internal_error(self):
        columns = make_columns([])

        with pytest.raises(InternalError):
            await OrderedSetReconciler(columns).reorder(5, [1])

        columns.set_position.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_snapshot_failure_is_internal_error(self):
        columns = make_columns([1])
        columns.list.side_effect = RuntimeError("connection reset")

        with pytest.raises(InternalError):
            await OrderedSetReconciler(columns).reorder(5, [1])

    @pytest.mark.asyncio
    async def test_reorder_is_idempotent(self):
        columns = make_columns([1, 2, 3])
        reconciler = OrderedSetReconciler(columns)

        first = await reconciler.reorder(5, [2, 3, 1])
        second = await reconciler.reorder(5, [2, 3, 1])

        assert first == second == {"success": True}
        calls = columns.set_position.await_args_list
        assert calls[:3] == calls[3:]
