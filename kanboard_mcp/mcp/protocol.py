"""
MCP / JSON-RPC 2.0 协议定义

- 方法名枚举（封闭集合）
- 错误码与协议异常
- 响应信封构造
"""

from enum import Enum, IntEnum
from typing import Any, Dict, Optional, Union

JSONRPC_VERSION = "2.0"

RequestId = Optional[Union[int, str]]


class MCPMethod(str, Enum):
    """支持的 JSON-RPC 方法"""

    INITIALIZE = "initialize"
    INITIALIZED = "initialized"
    TOOLS_LIST = "tools/list"
    TOOLS_CALL = "tools/call"
    RESOURCES_LIST = "resources/list"
    RESOURCES_READ = "resources/read"
    LIST_OFFERINGS = "ListOfferings"
    LIST_OFFERINGS_LOWER = "listOfferings"
    PING = "ping"

    @classmethod
    def lookup(cls, name: Any) -> Optional["MCPMethod"]:
        """按方法名查找，未知方法返回 None"""
        if not isinstance(name, str):
            return None
        try:
            return cls(name)
        except ValueError:
            return None


class JsonRpcErrorCode(IntEnum):
    """JSON-RPC 标准错误码（对客户端暴露的完整集合）"""

    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603


class MCPError(Exception):
    """协议错误基类，可直接转换为错误信封"""

    code: JsonRpcErrorCode = JsonRpcErrorCode.INTERNAL_ERROR
    default_message = "Internal error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_response(self, request_id: RequestId) -> Dict[str, Any]:
        return error_response(self.code, self.message, request_id)


class ParseError(MCPError):
    code = JsonRpcErrorCode.PARSE_ERROR
    default_message = "Parse error"


class InvalidRequestError(MCPError):
    code = JsonRpcErrorCode.INVALID_REQUEST
    default_message = "Invalid Request"


class MethodNotFoundError(MCPError):
    code = JsonRpcErrorCode.METHOD_NOT_FOUND
    default_message = "Method not found"


class InvalidParamsError(MCPError):
    code = JsonRpcErrorCode.INVALID_PARAMS
    default_message = "Invalid params"


class InternalError(MCPError):
    """内部错误，消息固定为通用文本，细节只写日志"""

    code = JsonRpcErrorCode.INTERNAL_ERROR
    default_message = "Internal error"


def success_response(result: Any, request_id: RequestId) -> Dict[str, Any]:
    """构造成功响应"""
    return {
        "jsonrpc": JSONRPC_VERSION,
        "id": request_id,
        "result": result,
    }


def error_response(code: int, message: str, request_id: RequestId) -> Dict[str, Any]:
    """构造错误响应"""
    return {
        "jsonrpc": JSONRPC_VERSION,
        "id": request_id,
        "error": {
            "code": int(code),
            "message": message,
        },
    }


def extract_request_id(payload: Any) -> RequestId:
    """尽量从原始请求中取出 id，取不到返回 None"""
    if isinstance(payload, dict):
        request_id = payload.get("id")
        if isinstance(request_id, (int, str)) and not isinstance(request_id, bool):
            return request_id
    return None


def is_notification(payload: Any) -> bool:
    """没有 id 字段的请求是通知，不应返回响应"""
    return isinstance(payload, dict) and "id" not in payload
