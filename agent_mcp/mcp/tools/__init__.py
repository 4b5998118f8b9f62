"""
MCP Tools adaptation layer.

This module contains components for exposing MCP server tools as framework tools:
- adapter: Tool wrapping and result formatting
"""

from .adapter import MCPToolWrapper, format_object_as_text, reshape_result

__all__ = [
    "MCPToolWrapper",
    "format_object_as_text",
    "reshape_result",
]
