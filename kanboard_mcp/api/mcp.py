"""
MCP 网关端点

单一端点，处理顺序：
1. 写入 CORS 头（所有响应都带）
2. OPTIONS 预检直接返回 200
3. 校验 URL 中的能力令牌，失败 401
4. 按 Accept 头选择传输（SSE / Streamable HTTP）
"""

from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse

from kanboard_mcp.api.deps import DbSession, EngineStoresDep, TokenStoreDep
from kanboard_mcp.core.config import settings
from kanboard_mcp.core.logging import get_logger
from kanboard_mcp.mcp.dispatcher import MCPDispatcher
from kanboard_mcp.mcp.transport import (
    Transport,
    handle_request_response,
    open_event_stream,
    select_transport,
)

logger = get_logger(__name__)

router = APIRouter()

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS, HEAD",
    "Access-Control-Allow-Headers": (
        "Accept, Authorization, Content-Type, X-Requested-With, "
        "Origin, User-Agent, Cache-Control, Pragma"
    ),
    "Access-Control-Expose-Headers": "Content-Type, Cache-Control, Expires, Pragma",
    "Access-Control-Max-Age": "86400",
}

ALLOWED_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS", "HEAD", "PATCH"]


def with_cors(response: Response) -> Response:
    """补齐 CORS 头，不覆盖传输层已设置的值"""
    for name, value in CORS_HEADERS.items():
        response.headers.setdefault(name, value)
    return response


@router.api_route("", methods=ALLOWED_METHODS, include_in_schema=False)
async def mcp_endpoint(
    request: Request,
    db: DbSession,
    token_store: TokenStoreDep,
    stores: EngineStoresDep,
) -> Response:
    """
    MCP 端点

    认证方式：URL 查询参数 ?token=<capability token>
    """
    if request.method == "OPTIONS":
        return with_cors(Response(status_code=200))

    token = request.query_params.get(settings.MCP_TOKEN_PARAM, "")
    if not await token_store.validate(token):
        logger.warning(
            "mcp_unauthorized",
            method=request.method,
            client=request.client.host if request.client else None,
            token_present=bool(token),
        )
        return with_cors(JSONResponse({"error": "Unauthorized"}, status_code=401))

    transport = select_transport(request.headers.get("accept"))
    if transport is Transport.SSE:
        # 事件流不访问数据库，交出响应前先归还连接
        await db.close()
        return with_cors(open_event_stream(request))

    response = await handle_request_response(request, lambda: MCPDispatcher(stores))
    return with_cors(response)
