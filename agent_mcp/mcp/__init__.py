"""
MCP (Model Context Protocol) functionality for the agent-mcp framework.

This module contains all MCP-related components organized with clear separation of concerns:
- transport: Transport selection per protocol type
- client: Client lifecycle (connect, discover, call, close)
- schema: Normalization of tool listings into one parameter model
- tools: MCP tools adapted as framework tools
- manager: Pool of clients and their tools
"""

from .client import FastMCPClientWrapper, MCPClientWrapper, create_mcp_client
from .manager import MCPManager, load_server_configs
from .schema import normalize_tool, normalize_tools
from .tools import MCPToolWrapper, format_object_as_text, reshape_result
from .transport import create_transport

__all__ = [
    "FastMCPClientWrapper",
    "MCPClientWrapper",
    "create_mcp_client",
    "MCPManager",
    "load_server_configs",
    "normalize_tool",
    "normalize_tools",
    "MCPToolWrapper",
    "format_object_as_text",
    "reshape_result",
    "create_transport",
]
