"""Wujie AI image generation exposed as MCP tools."""

__version__ = "1.0.0"
