"""News dashboard feed aggregation, ranking and MCP server."""

__version__ = "1.0.0"
