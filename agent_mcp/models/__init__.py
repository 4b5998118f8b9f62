"""
Pydantic models for the agent-mcp framework.
"""

from .base import BaseFrameworkModel
from .config import (
    MCPProtocolType, MCPStdioConfig, MCPSseConfig, MCPStreamableHttpConfig, MCPServerConfig
)
from .errors import (
    ErrorType, MCPError, ToolError, MCPException, ConfigurationError, UnsupportedProtocolError,
    MCPConnectionError, ClientClosedError, ToolDiscoveryError, ToolException, ToolInvocationError, ToolInputError
)
from .tools import ClientState, ToolParameter, MCPTool, ToolSchema

__all__ = [
    "BaseFrameworkModel",
    # Configuration
    "MCPProtocolType",
    "MCPStdioConfig",
    "MCPSseConfig",
    "MCPStreamableHttpConfig",
    "MCPServerConfig",
    # Errors
    "ErrorType",
    "MCPError",
    "ToolError",
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
]
