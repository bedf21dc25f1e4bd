"""
JSON-RPC 分发器测试
"""

import json

import pytest

from kanboard_mcp.mcp.dispatcher import MCPDispatcher


def rpc(method, params=None, request_id=1):
    request = {"jsonrpc": "2.0", "method": method, "id": request_id}
    if params is not None:
        request["params"] = params
    return request


def tool_call(name, arguments=None, request_id=1):
    return rpc("tools/call", {"name": name, "arguments": arguments or {}}, request_id)


def tool_payload(response):
    """取出 text 内容块中的 JSON"""
    content = response["result"]["content"]
    assert len(content) == 1
    assert content[0]["type"] == "text"
    return json.loads(content[0]["text"])


class TestEnvelope:
    """信封校验"""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("request_body", ["ping", [rpc("ping")], None, 42])
    async def test_non_object_is_invalid_request(self, stores, request_body):
        response = await MCPDispatcher(stores).handle(request_body)

        assert response == {
            "jsonrpc": "2.0",
            "id": None,
            "error": {"code": -32600, "message": "Invalid Request"},
        }

    @pytest.mark.asyncio
    async def test_wrong_version_keeps_id(self, stores):
        response = await MCPDispatcher(stores).handle({"jsonrpc": "1.0", "method": "ping", "id": 5})

        assert response["id"] == 5
        assert response["error"]["code"] == -32600

    @pytest.mark.asyncio
    async def test_unknown_method(self, stores):
        response = await MCPDispatcher(stores).handle(rpc("tools/destroy", request_id="abc"))

        assert response["id"] == "abc"
        assert response["error"] == {"code": -32601, "message": "Method not found: tools/destroy"}
        assert "result" not in response

    @pytest.mark.asyncio
    async def test_params_must_be_object(self, stores):
        response = await MCPDispatcher(stores).handle(rpc("tools/list", params=[1, 2]))

        assert response["error"]["code"] == -32602


class TestNotifications:
    """通知永不返回响应"""

    @pytest.mark.asyncio
    async def test_initialized(self, stores):
        dispatcher = MCPDispatcher(stores)

        assert await dispatcher.handle({"jsonrpc": "2.0", "method": "initialized"}) is None

    @pytest.mark.asyncio
    async def test_initialized_with_id_still_silent(self, stores):
        assert await MCPDispatcher(stores).handle(rpc("initialized")) is None

    @pytest.mark.asyncio
    async def test_failed_notification_is_silent(self, stores):
        dispatcher = MCPDispatcher(stores)

        assert await dispatcher.handle({"jsonrpc": "2.0", "method": "unknown"}) is None

    @pytest.mark.asyncio
    async def test_notification_still_runs(self, stores):
        stores.projects.list.return_value = []
        request = {
            "jsonrpc": "2.0",
            "method": "tools/call",
            "params": {"name": "get_projects"},
        }

        assert await MCPDispatcher(stores).handle(request) is None
        stores.projects.list.assert_awaited_once()


class TestLifecycle:
    """生命周期方法"""

    @pytest.mark.asyncio
    async def test_initialize(self, stores):
        response = await MCPDispatcher(stores).handle(
            rpc("initialize", {"protocolVersion": "2024-11-05", "clientInfo": {"name": "test"}})
        )

        result = response["result"]
        assert result["protocolVersion"] == "2024-11-05"
        assert result["capabilities"] == {"tools": {}, "resources": {}}
        assert result["serverInfo"]["name"] == "Kanboard MCP Server"

    @pytest.mark.asyncio
    async def test_ping(self, stores):
        response = await MCPDispatcher(stores).handle(rpc("ping", request_id=9))

        assert response == {"jsonrpc": "2.0", "id": 9, "result": {"message": "pong"}}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", ["ListOfferings", "listOfferings"])
    async def test_list_offerings(self, stores, method):
        response = await MCPDispatcher(stores).handle(rpc(method))

        assert response["result"] == {"offerings": []}

    @pytest.mark.asyncio
    async def test_tools_list(self, stores):
        response = await MCPDispatcher(stores).handle(rpc("tools/list"))

        tools = response["result"]["tools"]
        assert len(tools) == 26
        assert tools[0]["name"] == "get_projects"


class TestResources:
    """资源读取"""

    @pytest.mark.asyncio
    async def test_list(self, stores):
        response = await MCPDispatcher(stores).handle(rpc("resources/list"))

        uris = [resource["uri"] for resource in response["result"]["resources"]]
        assert uris == ["kanboard://projects", "kanboard://users"]

    @pytest.mark.asyncio
    async def test_read_projects(self, stores):
        stores.projects.list.return_value = [{"id": 1, "name": "Roadmap"}]

        response = await MCPDispatcher(stores).handle(
            rpc("resources/read", {"uri": "kanboard://projects"})
        )

        content = response["result"]["contents"][0]
        assert content["uri"] == "kanboard://projects"
        assert content["mimeType"] == "application/json"
        assert json.loads(content["text"]) == [{"id": 1, "name": "Roadmap"}]

    @pytest.mark.asyncio
    async def test_read_unknown(self, stores):
        response = await MCPDispatcher(stores).handle(
            rpc("resources/read", {"uri": "kanboard://secrets"})
        )

        assert response["error"] == {
            "code": -32602,
            "message": "Resource not found: kanboard://secrets",
        }


class TestToolCalls:
    """tools/call"""

    @pytest.mark.asyncio
    async def test_unknown_tool(self, stores):
        response = await MCPDispatcher(stores).handle(tool_call("drop_database"))

        assert response["error"] == {"code": -32601, "message": "Tool not found: drop_database"}

    @pytest.mark.asyncio
    async def test_get_tasks_defaults_to_open(self, stores):
        stores.tasks.list.return_value = [{"id": 3, "title": "Write docs"}]

        response = await MCPDispatcher(stores).handle(tool_call("get_tasks", {"project_id": "5"}))

        stores.tasks.list.assert_awaited_once_with(5, 1)
        assert tool_payload(response) == [{"id": 3, "title": "Write docs"}]

    @pytest.mark.asyncio
    async def test_bad_status_rejected_before_store(self, stores):
        response = await MCPDispatcher(stores).handle(
            tool_call("get_tasks", {"project_id": 5, "status_id": 2})
        )

        assert response["error"]["code"] == -32602
        assert "status_id" in response["error"]["message"]
        stores.tasks.list.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_oversized_id_is_invalid_params(self, stores):
        response = await MCPDispatcher(stores).handle(
            tool_call("get_tasks", {"project_id": 10**30})
        )

        assert response["error"]["code"] == -32602
        assert "project_id must not exceed" in response["error"]["message"]
        stores.tasks.list.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_required_argument(self, stores):
        response = await MCPDispatcher(stores).handle(tool_call("create_task", {"project_id": 1}))

        assert response["error"]["code"] == -32602
        assert "title" in response["error"]["message"]
        stores.tasks.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_arguments_must_be_object(self, stores):
        response = await MCPDispatcher(stores).handle(
            rpc("tools/call", {"name": "get_projects", "arguments": "all"})
        )

        assert response["error"]["code"] == -32602

    @pytest.mark.asyncio
    async def test_create_task(self, stores):
        stores.tasks.create.return_value = 17

        response = await MCPDispatcher(stores).handle(
            tool_call("create_task", {"project_id": 2, "title": "  Ship it  "})
        )

        stores.tasks.create.assert_awaited_once_with(2, "Ship it", description="", column_id=None)
        assert tool_payload(response) == {"task_id": 17}

    @pytest.mark.asyncio
    async def test_update_task_only_sends_provided_fields(self, stores):
        stores.tasks.update.return_value = True

        response = await MCPDispatcher(stores).handle(
            tool_call("update_task", {"task_id": 3, "title": "New"})
        )

        stores.tasks.update.assert_awaited_once_with(3, {"title": "New"})
        assert tool_payload(response) == {"success": True}

    @pytest.mark.asyncio
    async def test_set_task_due_date(self, stores):
        stores.tasks.update.return_value = True

        await MCPDispatcher(stores).handle(
            tool_call("set_task_due_date", {"task_id": 7, "due_date": "2024-01-15"})
        )

        stores.tasks.update.assert_awaited_once_with(7, {"date_due": 1705276800})

    @pytest.mark.asyncio
    async def test_task_not_found(self, stores):
        stores.tasks.get.return_value = None

        response = await MCPDispatcher(stores).handle(tool_call("get_task_details", {"task_id": 9}))

        assert response["error"] == {"code": -32602, "message": "Task not found: 9"}

    @pytest.mark.asyncio
    async def test_store_failure_is_generic_internal_error(self, stores):
        stores.projects.list.side_effect = RuntimeError("password=hunter2")

        response = await MCPDispatcher(stores).handle(tool_call("get_projects", request_id=4))

        assert response == {
            "jsonrpc": "2.0",
            "id": 4,
            "error": {"code": -32603, "message": "Internal error"},
        }

    @pytest.mark.asyncio
    async def test_reorder_columns(self, stores):
        stores.columns.list.return_value = [{"id": 1}, {"id": 2}, {"id": 3}]
        stores.columns.set_position.return_value = True

        response = await MCPDispatcher(stores).handle(
            tool_call("reorder_columns", {"project_id": 1, "column_ids": [3, 2, 1]})
        )

        assert tool_payload(response) == {"success": True}
        assert stores.columns.set_position.await_count == 3

    @pytest.mark.asyncio
    async def test_reorder_columns_mismatch(self, stores):
        stores.columns.list.return_value = [{"id": 1}, {"id": 2}, {"id": 3}]

        response = await MCPDispatcher(stores).handle(
            tool_call("reorder_columns", {"project_id": 1, "column_ids": [1, 2, 4]})
        )

        message = response["error"]["message"]
        assert response["error"]["code"] == -32602
        assert "missing=[3]" in message
        assert "unknown=[4]" in message
        stores.columns.set_position.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_reorder_columns_duplicates(self, stores):
        response = await MCPDispatcher(stores).handle(
            tool_call("reorder_columns", {"project_id": 1, "column_ids": [1, 1, 2]})
        )

        assert response["error"]["code"] == -32602
        assert "duplicate ids" in response["error"]["message"]
        stores.columns.list.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_reorder_columns_partial_failure(self, stores):
        stores.columns.list.return_value = [{"id": 1}, {"id": 2}, {"id": 3}]
        stores.columns.set_position.side_effect = [True, False, True]

        response = await MCPDispatcher(stores).handle(
            tool_call("reorder_columns", {"project_id": 1, "column_ids": [3, 1, 2]})
        )

        assert response["error"] == {"code": -32603, "message": "Internal error"}
        assert stores.columns.set_position.await_count == 2
