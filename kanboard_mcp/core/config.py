"""
应用配置

使用 pydantic-settings 管理环境变量配置
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """应用配置类"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # 基础配置
    ENV: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # 服务配置
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # 数据库配置（Kanboard 数据库，支持 sqlite+aiosqlite / postgresql+asyncpg）
    DATABASE_URL: str = "sqlite+aiosqlite:///./kanboard.db"
    AUTO_CREATE_TABLES: bool = True

    # 数据库连接池配置（仅对非 SQLite 生效）
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800  # 30 分钟

    # MCP 端点配置
    MCP_PATH: str = "/mcp"
    MCP_TOKEN_PARAM: str = "token"
    MCP_PROTOCOL_VERSION: str = "2024-11-05"
    MCP_SERVER_NAME: str = "Kanboard MCP Server"
    MCP_SERVER_VERSION: str = "1.0.0"

    # SSE 心跳配置
    MCP_HEARTBEAT_INTERVAL_SECONDS: int = 30
    MCP_POLL_INTERVAL_SECONDS: float = 1.0

    # Token 配置
    DEFAULT_TOKEN_NAME: str = "Default Token"

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")


@lru_cache
def get_settings() -> Settings:
    """获取配置单例"""
    return Settings()


settings = get_settings()
