"""
传输层协商

根据 Accept 头在两种传输之间选择：
- SSE 事件流：Accept 含 text/event-stream 且不含 application/json
- Streamable HTTP（请求/响应）：其他所有情况（混合偏好默认走请求/响应）

SSE 通道只用于保持推送连接：发送 connect 事件和周期性心跳，
不读取请求体，也不分发 JSON-RPC 请求
"""

import asyncio
import json
import time
from enum import Enum
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, Optional

from fastapi import Request
from fastapi.responses import JSONResponse, Response, StreamingResponse

from kanboard_mcp.core.config import settings
from kanboard_mcp.core.logging import get_logger
from kanboard_mcp.mcp.dispatcher import MCPDispatcher
from kanboard_mcp.mcp.protocol import InternalError, ParseError, extract_request_id

logger = get_logger(__name__)

EVENT_STREAM = "text/event-stream"
JSON_MEDIA_TYPE = "application/json"

HTTP_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
    "Access-Control-Allow-Headers": (
        "Accept, Authorization, Content-Type, Last-Event-ID, X-Requested-With"
    ),
}


class Transport(str, Enum):
    """传输类型"""

    SSE = "sse"
    STREAMABLE_HTTP = "streamable-http"


def select_transport(accept: Optional[str]) -> Transport:
    """按 Accept 头选择传输"""
    accept = (accept or "").lower()
    if EVENT_STREAM in accept and JSON_MEDIA_TYPE not in accept:
        return Transport.SSE
    return Transport.STREAMABLE_HTTP


def server_status() -> Dict[str, Any]:
    """GET 存活探测返回的静态状态描述（不是 MCP 结果信封）"""
    return {
        "status": "MCP Server Ready",
        "transport": Transport.STREAMABLE_HTTP.value,
        "protocol": "Model Context Protocol",
        "version": settings.MCP_PROTOCOL_VERSION,
    }


# ============================================================
# SSE
# ============================================================

def format_sse(event: str, data: Dict[str, Any]) -> str:
    """格式化一帧 SSE 事件"""
    return f"event: {event}\ndata: {json.dumps(data)}\n\n"


async def heartbeat_events(
    is_disconnected: Callable[[], Awaitable[bool]],
    heartbeat_interval: Optional[float] = None,
    poll_interval: Optional[float] = None,
    clock: Callable[[], float] = time.time,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> AsyncIterator[str]:
    """
    SSE 事件生成器

    立即发送 connect 事件；之后每个 tick 检查一次客户端是否断开，
    第一个 tick 及此后每 heartbeat_interval 秒发送一次心跳。
    检测到断开或任务被取消时结束
    """
    heartbeat_interval = heartbeat_interval or settings.MCP_HEARTBEAT_INTERVAL_SECONDS
    poll_interval = poll_interval or settings.MCP_POLL_INTERVAL_SECONDS
    ticks_per_heartbeat = max(1, round(heartbeat_interval / poll_interval))

    yield format_sse("connect", {"type": "connect", "message": "MCP Server connected"})

    tick = 0
    try:
        while True:
            if tick % ticks_per_heartbeat == 0:
                yield format_sse("heartbeat", {"type": "heartbeat", "timestamp": int(clock())})

            if await is_disconnected():
                logger.info("mcp_sse_disconnected", ticks=tick)
                return

            await sleep(poll_interval)
            tick += 1
    except asyncio.CancelledError:
        logger.info("mcp_sse_cancelled", ticks=tick)
        raise


def open_event_stream(request: Request) -> StreamingResponse:
    """打开 SSE 推送连接"""
    logger.info("mcp_sse_connected", client=request.client.host if request.client else None)
    return StreamingResponse(
        heartbeat_events(request.is_disconnected),
        media_type=EVENT_STREAM,
        headers=SSE_HEADERS,
    )


# ============================================================
# Streamable HTTP
# ============================================================

async def handle_request_response(
    request: Request,
    dispatcher_factory: Callable[[], MCPDispatcher],
) -> Response:
    """
    请求/响应传输

    - GET: 返回服务状态
    - POST: 解析 JSON-RPC 请求并分发
    - 其他方法: 405
    """
    if request.method == "GET":
        return JSONResponse(server_status(), headers=HTTP_HEADERS)

    if request.method != "POST":
        return JSONResponse(
            {"error": "Method Not Allowed"},
            status_code=405,
            headers=HTTP_HEADERS,
        )

    body = await request.body()
    try:
        payload = json.loads(body)
    except ValueError:
        logger.info("mcp_parse_error", body_size=len(body))
        return JSONResponse(ParseError().to_response(None), headers=HTTP_HEADERS)

    try:
        response = await dispatcher_factory().handle(payload)
    except Exception as e:
        logger.error(
            "mcp_dispatch_failed",
            error_type=type(e).__name__,
            error=str(e),
            exc_info=True,
        )
        return JSONResponse(
            InternalError().to_response(extract_request_id(payload)),
            status_code=500,
            headers=HTTP_HEADERS,
        )

    if response is None:
        return Response(status_code=204, headers=HTTP_HEADERS)

    return JSONResponse(response, headers=HTTP_HEADERS)
