"""
MCP 协议模块

JSON-RPC 2.0 之上的 Model Context Protocol 实现：

核心组件：
- protocol: 信封与错误码
- registry: 工具目录（tools/list）
- executor: 工具执行（tools/call）
- reconciler: 列重排的有序集合协调
- dispatcher: 方法路由
- transport: SSE / Streamable HTTP 传输协商
"""

from kanboard_mcp.mcp.dispatcher import MCPDispatcher
from kanboard_mcp.mcp.executor import ToolExecutor
from kanboard_mcp.mcp.protocol import (
    InternalError,
    InvalidParamsError,
    InvalidRequestError,
    JsonRpcErrorCode,
    MCPError,
    MCPMethod,
    MethodNotFoundError,
    ParseError,
)
from kanboard_mcp.mcp.reconciler import OrderedSetReconciler
from kanboard_mcp.mcp.registry import ToolDefinition, ToolName, ToolRegistry, get_tool_registry
from kanboard_mcp.mcp.transport import Transport, select_transport

__all__ = [
    "MCPDispatcher",
    "ToolExecutor",
    "OrderedSetReconciler",
    "ToolDefinition",
    "ToolName",
    "ToolRegistry",
    "get_tool_registry",
    "Transport",
    "select_transport",
    "MCPMethod",
    "JsonRpcErrorCode",
    "MCPError",
    "ParseError",
    "InvalidRequestError",
    "MethodNotFoundError",
    "InvalidParamsError",
    "InternalError",
]
