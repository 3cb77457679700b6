"""MCP boundary - tools, resources and prompts over stdio."""

from .app import create_server, main, run_server
from .tools import NewsTools

__all__ = ["create_server", "main", "run_server", "NewsTools"]
