"""
Kanboard MCP Server

通过 Model Context Protocol 暴露 Kanboard 项目管理能力
"""

__version__ = "1.0.0"
