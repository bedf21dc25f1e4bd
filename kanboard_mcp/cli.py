"""
Kanboard MCP 命令行工具

用法：
    # 创建数据表
    kanboard-mcp init-db

    # 生成新令牌（旧令牌全部失效）
    kanboard-mcp generate-token --name "Claude Desktop"

    # 查看当前令牌和连接地址（没有令牌时自动生成）
    kanboard-mcp show-token --base-url https://kanboard.example.com

    # 列出所有令牌（含已停用）
    kanboard-mcp list-tokens

    # 启动服务
    kanboard-mcp serve --host 0.0.0.0 --port 8000
"""

import argparse
import asyncio
import json
import sys
from datetime import datetime, timezone
from typing import Optional

from kanboard_mcp.core.config import settings
from kanboard_mcp.core.logging import setup_logging
from kanboard_mcp.database.engine import async_session_maker, close_db, init_db
from kanboard_mcp.services import SQLTokenStore


def endpoint_url(token: str, base_url: Optional[str] = None) -> str:
    """拼出客户端连接地址"""
    base_url = (base_url or f"http://{settings.HOST}:{settings.PORT}").rstrip("/")
    return f"{base_url}{settings.MCP_PATH}?{settings.MCP_TOKEN_PARAM}={token}"


def client_config(url: str) -> str:
    """MCP 客户端配置片段，可直接粘贴到 Claude Desktop 等客户端"""
    return json.dumps({"mcpServers": {"kanboard": {"url": url}}}, indent=2)


def print_client_config(url: str) -> None:
    print()
    print("复制以下配置到 MCP 客户端设置:")
    print(client_config(url))
    print()
    print("注意: 该 URL 拥有 Kanboard 的完整访问权限，请妥善保管")


async def run_init_db() -> None:
    try:
        await init_db()
    finally:
        await close_db()
    print("数据表已创建")


async def run_generate_token(name: str, base_url: Optional[str]) -> None:
    try:
        await init_db()
        async with async_session_maker() as session:
            token = await SQLTokenStore(session).generate_token(name)
    finally:
        await close_db()

    print("新令牌已生成（旧令牌已失效）:")
    print(f"  Name:  {name}")
    print(f"  Token: {token}")
    url = endpoint_url(token, base_url)
    print(f"  URL:   {url}")
    print_client_config(url)


async def run_show_token(base_url: Optional[str]) -> None:
    try:
        await init_db()
        async with async_session_maker() as session:
            store = SQLTokenStore(session)
            token = await store.current_token()
            if token is None:
                token = await store.generate_token(settings.DEFAULT_TOKEN_NAME)
                print("尚无有效令牌，已自动生成")
    finally:
        await close_db()

    url = endpoint_url(token, base_url)
    print(f"Token: {token}")
    print(f"URL:   {url}")
    print_client_config(url)


async def run_list_tokens() -> None:
    try:
        await init_db()
        async with async_session_maker() as session:
            tokens = await SQLTokenStore(session).list_tokens()
    finally:
        await close_db()

    if not tokens:
        print("尚无令牌")
        return

    print(f"{'ID':<6}{'Name':<24}{'Active':<8}Created")
    for token in tokens:
        created = datetime.fromtimestamp(token["created_at"], tz=timezone.utc)
        print(
            f"{token['id']:<6}{token['name']:<24}"
            f"{'yes' if token['is_active'] else 'no':<8}"
            f"{created:%Y-%m-%d %H:%M:%S} UTC"
        )


def run_serve(host: str, port: int, reload: bool) -> None:
    import uvicorn

    uvicorn.run(
        "kanboard_mcp.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level=settings.LOG_LEVEL.lower(),
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="kanboard-mcp", description="Kanboard MCP Server")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("init-db", help="创建缺失的数据表")

    generate = subparsers.add_parser("generate-token", help="生成新令牌（旧令牌全部失效）")
    generate.add_argument(
        "--name", "-n",
        default=settings.DEFAULT_TOKEN_NAME,
        help=f"令牌名称 (默认: {settings.DEFAULT_TOKEN_NAME})",
    )
    generate.add_argument("--base-url", help="对外访问地址，用于拼接连接 URL")

    show = subparsers.add_parser("show-token", help="显示当前令牌和连接地址")
    show.add_argument("--base-url", help="对外访问地址，用于拼接连接 URL")

    subparsers.add_parser("list-tokens", help="列出所有令牌（含已停用）")

    serve = subparsers.add_parser("serve", help="启动 MCP 服务")
    serve.add_argument("--host", default=settings.HOST, help=f"监听地址 (默认: {settings.HOST})")
    serve.add_argument("--port", "-p", type=int, default=settings.PORT, help=f"端口 (默认: {settings.PORT})")
    serve.add_argument("--reload", action="store_true", help="开发模式自动重载")

    return parser


def main(argv: Optional[list] = None) -> None:
    args = build_parser().parse_args(argv)

    if args.command == "serve":
        run_serve(args.host, args.port, args.reload)
        return

    setup_logging()

    if args.command == "init-db":
        asyncio.run(run_init_db())
    elif args.command == "generate-token":
        if not args.name.strip():
            print("错误: 令牌名称不能为空")
            sys.exit(1)
        asyncio.run(run_generate_token(args.name.strip(), args.base_url))
    elif args.command == "show-token":
        asyncio.run(run_show_token(args.base_url))
    elif args.command == "list-tokens":
        asyncio.run(run_list_tokens())


if __name__ == "__main__":
    main()
