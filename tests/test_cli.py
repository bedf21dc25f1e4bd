"""
命令行工具测试
"""

import json
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from kanboard_mcp import cli
from kanboard_mcp.services import SQLTokenStore


def test_endpoint_url_defaults_to_bind_address():
    assert cli.endpoint_url("abc") == "http://0.0.0.0:8000/mcp?token=abc"


def test_endpoint_url_with_base_url():
    assert cli.endpoint_url("abc", "https://kb.example.com/") == "https://kb.example.com/mcp?token=abc"


def test_parser():
    args = cli.build_parser().parse_args(["generate-token", "--name", "Claude Desktop"])

    assert args.command == "generate-token"
    assert args.name == "Claude Desktop"
    assert args.base_url is None


def test_parser_requires_command():
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args([])


def test_client_config():
    config = json.loads(cli.client_config("https://kb.example.com/mcp?token=abc"))

    assert config == {"mcpServers": {"kanboard": {"url": "https://kb.example.com/mcp?token=abc"}}}


def test_parser_list_tokens():
    assert cli.build_parser().parse_args(["list-tokens"]).command == "list-tokens"


@pytest_asyncio.fixture
async def cli_database(test_engine, monkeypatch):
    """让命令行工具使用测试数据库"""
    session_maker = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
    monkeypatch.setattr(cli, "async_session_maker", session_maker)
    monkeypatch.setattr(cli, "init_db", AsyncMock())
    monkeypatch.setattr(cli, "close_db", AsyncMock())
    return session_maker


@pytest.mark.asyncio
async def test_show_token_generates_when_missing(cli_database, capsys):
    await cli.run_show_token(None)

    async with cli_database() as session:
        token = await SQLTokenStore(session).current_token()

    output = capsys.readouterr().out
    assert token is not None
    assert f"?token={token}" in output


@pytest.mark.asyncio
async def test_generate_token_replaces_existing(cli_database, capsys):
    await cli.run_generate_token("First", None)
    await cli.run_generate_token("Second", "https://kb.example.com")

    async with cli_database() as session:
        tokens = await SQLTokenStore(session).list_tokens()

    assert [token["is_active"] for token in tokens] == [False, True]
    assert "https://kb.example.com/mcp?token=" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_show_token_prints_client_config(cli_database, capsys):
    await cli.run_show_token("https://kb.example.com")

    async with cli_database() as session:
        token = await SQLTokenStore(session).current_token()

    output = capsys.readouterr().out
    snippet = output[output.index("{"):output.rindex("}") + 1]
    assert json.loads(snippet) == {
        "mcpServers": {"kanboard": {"url": f"https://kb.example.com/mcp?token={token}"}}
    }


@pytest.mark.asyncio
async def test_list_tokens(cli_database, capsys):
    await cli.run_generate_token("First", None)
    await cli.run_generate_token("Second", None)
    capsys.readouterr()

    await cli.run_list_tokens()

    lines = capsys.readouterr().out.splitlines()
    assert lines[0].startswith("ID")
    assert len(lines) == 3
    assert "First" in lines[1] and " no " in lines[1]
    assert "Second" in lines[2] and " yes " in lines[2]


@pytest.mark.asyncio
async def test_list_tokens_empty(cli_database, capsys):
    await cli.run_list_tokens()

    assert capsys.readouterr().out.strip() == "尚无令牌"
