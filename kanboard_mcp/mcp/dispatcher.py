"""
JSON-RPC 分发器

每次调用无状态：校验信封 → 按方法路由 → 构造成功/错误信封。

- 信封不合法（非对象、jsonrpc 不是 "2.0"）→ -32600
- 未知方法 → -32601
- 处理过程中的 MCPError → 对应错误信封
- 其他异常 → -32603（通用消息，细节只写日志）
- 没有 id 的请求是通知，永不返回响应
"""

import json
from typing import Any, Awaitable, Callable, Dict, List, Optional

from kanboard_mcp.core.config import settings
from kanboard_mcp.core.logging import get_logger
from kanboard_mcp.mcp.executor import ToolExecutor
from kanboard_mcp.mcp.protocol import (
    JSONRPC_VERSION,
    InternalError,
    InvalidParamsError,
    InvalidRequestError,
    MCPError,
    MCPMethod,
    MethodNotFoundError,
    extract_request_id,
    is_notification,
    success_response,
)
from kanboard_mcp.mcp.registry import ToolRegistry, get_tool_registry
from kanboard_mcp.services.base import EngineStores

logger = get_logger(__name__)

MethodHandler = Callable[[Dict[str, Any]], Awaitable[Optional[Dict[str, Any]]]]

RESOURCE_MIME_TYPE = "application/json"
PROJECTS_URI = "kanboard://projects"
USERS_URI = "kanboard://users"

RESOURCES: List[Dict[str, str]] = [
    {
        "uri": PROJECTS_URI,
        "name": "Project List",
        "description": "List of all projects",
        "mimeType": RESOURCE_MIME_TYPE,
    },
    {
        "uri": USERS_URI,
        "name": "User List",
        "description": "List of all users",
        "mimeType": RESOURCE_MIME_TYPE,
    },
]


class MCPDispatcher:
    """MCP 请求分发器"""

    def __init__(self, stores: EngineStores, registry: Optional[ToolRegistry] = None):
        self.stores = stores
        self.registry = registry or get_tool_registry()
        self.executor = ToolExecutor(stores, self.registry)
        self._handlers: Dict[MCPMethod, MethodHandler] = {
            MCPMethod.INITIALIZE: self._initialize,
            MCPMethod.INITIALIZED: self._initialized,
            MCPMethod.TOOLS_LIST: self._list_tools,
            MCPMethod.TOOLS_CALL: self._call_tool,
            MCPMethod.RESOURCES_LIST: self._list_resources,
            MCPMethod.RESOURCES_READ: self._read_resource,
            MCPMethod.LIST_OFFERINGS: self._list_offerings,
            MCPMethod.LIST_OFFERINGS_LOWER: self._list_offerings,
            MCPMethod.PING: self._ping,
        }

        missing = set(MCPMethod) - set(self._handlers)
        if missing:
            raise RuntimeError(f"Unhandled MCP methods: {sorted(m.value for m in missing)}")

    async def handle(self, request: Any) -> Optional[Dict[str, Any]]:
        """
        处理一个已解码的 JSON-RPC 请求

        Returns:
            响应信封；通知返回 None
        """
        request_id = extract_request_id(request)

        if not isinstance(request, dict) or request.get("jsonrpc") != JSONRPC_VERSION:
            return InvalidRequestError().to_response(request_id)

        notification = is_notification(request)
        method_name = request.get("method")
        log = logger.bind(method=method_name, request_id=request_id)

        try:
            result = await self._route(request)
        except MCPError as e:
            if notification:
                log.warning("mcp_notification_failed", code=int(e.code), error=e.message)
                return None
            return e.to_response(request_id)
        except Exception as e:
            log.error(
                "mcp_method_failed",
                error_type=type(e).__name__,
                error=str(e),
                exc_info=True,
            )
            if notification:
                return None
            return InternalError().to_response(request_id)

        if notification or result is None:
            return None
        return success_response(result, request_id)

    async def _route(self, request: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        method_name = request.get("method")
        method = MCPMethod.lookup(method_name)
        if method is None:
            raise MethodNotFoundError(f"Method not found: {method_name}")

        params = request.get("params")
        if params is None:
            params = {}
        if not isinstance(params, dict):
            raise InvalidParamsError("Invalid params: params must be an object")

        return await self._handlers[method](params)

    # ============================================================
    # 生命周期
    # ============================================================

    async def _initialize(self, params: Dict[str, Any]) -> Dict[str, Any]:
        client_info = params.get("clientInfo") or {}
        if isinstance(client_info, dict):
            logger.info(
                "mcp_client_initialize",
                client_name=client_info.get("name"),
                client_version=client_info.get("version"),
                client_protocol=params.get("protocolVersion"),
            )

        return {
            "protocolVersion": settings.MCP_PROTOCOL_VERSION,
            "capabilities": {
                "tools": {},
                "resources": {},
            },
            "serverInfo": {
                "name": settings.MCP_SERVER_NAME,
                "version": settings.MCP_SERVER_VERSION,
            },
        }

    async def _initialized(self, params: Dict[str, Any]) -> None:
        return None

    async def _ping(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return {"message": "pong"}

    async def _list_offerings(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return {"offerings": []}

    # ============================================================
    # 工具
    # ============================================================

    async def _list_tools(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return {"tools": self.registry.list_descriptors()}

    async def _call_tool(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return await self.executor.call(params)

    # ============================================================
    # 资源
    # ============================================================

    async def _list_resources(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return {"resources": [dict(resource) for resource in RESOURCES]}

    async def _read_resource(self, params: Dict[str, Any]) -> Dict[str, Any]:
        uri = params.get("uri")

        if uri == PROJECTS_URI:
            records = await self.stores.projects.list()
        elif uri == USERS_URI:
            records = await self.stores.users.list()
        else:
            raise InvalidParamsError(f"Resource not found: {uri if uri is not None else ''}")

        return {
            "contents": [
                {
                    "uri": uri,
                    "mimeType": RESOURCE_MIME_TYPE,
                    "text": json.dumps(records, indent=2, ensure_ascii=False, default=str),
                }
            ]
        }
