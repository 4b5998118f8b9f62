"""
agent-mcp

Adapters that let an agent framework use tools hosted on MCP (Model Context
Protocol) servers as ordinary tools, whether the server runs as a local
process or is reached over SSE or streamable HTTP.
"""

from .models.config import MCPProtocolType, MCPStdioConfig, MCPSseConfig, MCPStreamableHttpConfig
from .models.errors import (
    MCPException, ConfigurationError, UnsupportedProtocolError, MCPConnectionError, ClientClosedError,
    ToolDiscoveryError, ToolException, ToolInvocationError, ToolInputError
)
from .models.tools import ClientState, ToolParameter, MCPTool, ToolSchema
from .tool import BaseTool
from .mcp.client import MCPClientWrapper, FastMCPClientWrapper, create_mcp_client
from .mcp.manager import MCPManager
from .mcp.tools.adapter import MCPToolWrapper

__version__ = "0.1.0"
__all__ = [
    # Configuration
    "MCPProtocolType",
    "MCPStdioConfig",
    "MCPSseConfig",
    "MCPStreamableHttpConfig",

    # Errors
    "MCPException",
    "ConfigurationError",
    "UnsupportedProtocolError",
    "MCPConnectionError",
    "ClientClosedError",
    "ToolDiscoveryError",
    "ToolException",
    "ToolInvocationError",
    "ToolInputError",

    # Tools
    "ClientState",
    "ToolParameter",
    "MCPTool",
    "ToolSchema",
    "BaseTool",

    # MCP components
    "MCPClientWrapper",
    "FastMCPClientWrapper",
    "create_mcp_client",
    "MCPManager",
    "MCPToolWrapper",
]
