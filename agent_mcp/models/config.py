"""
Server configuration models.

One configuration variant exists per protocol type; the protocol type picks
the variant and the transport that is built from it.
"""

from enum import Enum
from typing import Dict, List, Optional, Union

from pydantic import AnyUrl, Field

from .base import StrictFrameworkModel


class MCPProtocolType(str, Enum):
    """Transport mechanism used to reach an MCP server."""
    STDIO = "stdio"
    SSE = "sse"
    STREAMABLE_HTTP = "streamable_http"


class MCPStdioConfig(StrictFrameworkModel):
    """
    Configuration for a server spawned as a local process.
    """
    command: str = Field(..., min_length=1, description="Executable to launch")
    args: List[str] = Field(default_factory=list, description="Command-line arguments")
    env: Optional[Dict[str, str]] = Field(None, description="Environment overrides for the process")
    verbose: bool = Field(False, description="Emit diagnostic progress lines")


class MCPSseConfig(StrictFrameworkModel):
    """
    Configuration for a server reached over a server-sent event stream.
    """
    url: str = Field(..., min_length=1, description="Event stream endpoint URL")
    headers: Optional[Dict[str, str]] = Field(None, description="Extra request headers")
    verbose: bool = Field(False, description="Emit diagnostic progress lines")


class MCPStreamableHttpConfig(StrictFrameworkModel):
    """
    Configuration for a server reached over streamable HTTP.
    """
    base_url: Union[str, AnyUrl] = Field(..., alias="baseUrl", description="Server base URL")
    headers: Optional[Dict[str, str]] = Field(None, description="Extra request headers")
    timeout: Optional[float] = Field(None, gt=0, description="Request timeout in seconds (None: transport default)")
    verbose: bool = Field(False, description="Emit diagnostic progress lines")


MCPServerConfig = Union[MCPStdioConfig, MCPSseConfig, MCPStreamableHttpConfig]

PROTOCOL_CONFIGS = {
    MCPProtocolType.STDIO: MCPStdioConfig,
    MCPProtocolType.SSE: MCPSseConfig,
    MCPProtocolType.STREAMABLE_HTTP: MCPStreamableHttpConfig,
}
