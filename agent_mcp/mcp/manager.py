"""
MCP Manager pooling client connections and their tools.

The manager connects clients, wraps every discovered tool as an
MCPToolWrapper and exposes the combined, insertion-ordered tool list to the
agent runtime. Closing the manager closes every client it owns.
"""

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .client import MCPClientWrapper, create_mcp_client
from .transport import resolve_protocol
from .tools.adapter import MCPToolWrapper
from ..models.config import MCPProtocolType, MCPServerConfig
from ..models.errors import ConfigurationError

logger = logging.getLogger("agent-mcp-manager")

# Keys of an mcpServers entry that select the protocol rather than configure it
_PROTOCOL_KEYS = ("type", "transport")

_PROTOCOL_ALIASES = {
    "http": MCPProtocolType.STREAMABLE_HTTP,
    "streamable-http": MCPProtocolType.STREAMABLE_HTTP,
}


class MCPManager:
    """
    Pool of MCP client connections and the tools they expose.
    """

    def __init__(self):
        self.clients: List[MCPClientWrapper] = []
        self.tools: List[MCPToolWrapper] = []

    async def add_client(self, client: MCPClientWrapper) -> List[MCPToolWrapper]:
        """
        Connect a client and add its tools to the pool.

        If tool discovery fails after the client connected, the client is
        closed before the error propagates and nothing is added.

        Args:
            client: MCP client wrapper to add

        Returns:
            The tool wrappers created for this client
        """
        await client.initialize()

        try:
            mcp_tools = await client.list_tools()
        except Exception:
            await client.close()
            raise

        wrappers = [MCPToolWrapper(mcp_tool, client) for mcp_tool in mcp_tools]
        self.tools.extend(wrappers)
        self.clients.append(client)

        logger.info(f"Added MCP client {client.name} with {len(wrappers)} tools")
        return wrappers

    async def add_server(
        self,
        protocol_type: Union[MCPProtocolType, str],
        config: Union[MCPServerConfig, Mapping],
        name: Optional[str] = None,
    ) -> MCPClientWrapper:
        """
        Create a client for a server and add it to the pool.

        Returns:
            The connected client
        """
        client = create_mcp_client(protocol_type, config, name=name)
        await self.add_client(client)
        return client

    async def add_servers_from_config(self, config: Union[Mapping, str, Path]) -> List[MCPClientWrapper]:
        """
        Add every server of an ``mcpServers`` configuration.

        Args:
            config: Mapping holding an ``mcpServers`` table, or a path to a
                JSON file containing one

        Returns:
            The connected clients, in configuration order
        """
        clients = []
        for name, (protocol_type, server_config) in load_server_configs(config).items():
            clients.append(await self.add_server(protocol_type, server_config, name=name))
        return clients

    def get_tools(self) -> List[MCPToolWrapper]:
        """Snapshot of all pooled tools, in insertion order."""
        return list(self.tools)

    def get_tool(self, tool_name: str) -> Optional[MCPToolWrapper]:
        """
        Get a pooled tool by name.

        Returns:
            The first tool with that name, or None if not found
        """
        for tool in self.tools:
            if tool.name == tool_name:
                return tool
        return None

    def get_tool_names(self) -> List[str]:
        """Get list of pooled tool names."""
        return [tool.name for tool in self.tools]

    def get_available_tools(self) -> List[Dict[str, Any]]:
        """Get pooled tools in OpenAI function format for LLM integration."""
        return [tool.get_schema().to_openai_format() for tool in self.tools]

    async def close(self) -> None:
        """Close every client, continuing past failures, and empty the pool."""
        clients = self.clients
        self.tools = []
        self.clients = []

        for client in clients:
            try:
                await client.close()
            except Exception as e:
                logger.error(f"Error closing MCP client {client.name}: {e}")

        logger.info(f"Closed {len(clients)} MCP clients")

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()


def _protocol_for_entry(name: str, entry: Mapping) -> MCPProtocolType:
    tag = next((entry[key] for key in _PROTOCOL_KEYS if key in entry), None)
    if tag is None:
        if "command" in entry:
            return MCPProtocolType.STDIO
        if "url" in entry or "baseUrl" in entry:
            return MCPProtocolType.STREAMABLE_HTTP
        raise ConfigurationError(f"Cannot infer protocol type for MCP server '{name}'", server=name)
    if isinstance(tag, str) and tag in _PROTOCOL_ALIASES:
        return _PROTOCOL_ALIASES[tag]
    return resolve_protocol(tag)


def _entry_options(protocol_type: MCPProtocolType, entry: Mapping) -> Dict[str, Any]:
    options = {key: value for key, value in entry.items() if key not in _PROTOCOL_KEYS}
    # Streamable HTTP entries commonly spell the endpoint "url"
    if protocol_type == MCPProtocolType.STREAMABLE_HTTP and "url" in options and "baseUrl" not in options:
        options["baseUrl"] = options.pop("url")
    return options


def load_server_configs(config: Union[Mapping, str, Path]) -> Dict[str, Any]:
    """
    Read an ``mcpServers`` configuration.

    Args:
        config: Mapping or path to a JSON file

    Returns:
        Mapping of server name to (protocol type, option mapping)

    Raises:
        ConfigurationError: If the file cannot be read or has the wrong shape
    """
    if not isinstance(config, Mapping):
        path = Path(config)
        try:
            config = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise ConfigurationError(f"Failed to read MCP configuration from {path}: {e}") from e

    servers = config.get("mcpServers") if isinstance(config, Mapping) else None
    if not isinstance(servers, Mapping):
        raise ConfigurationError("MCP configuration must contain an 'mcpServers' object")

    resolved = {}
    for name, entry in servers.items():
        if not isinstance(entry, Mapping):
            raise ConfigurationError(f"MCP server '{name}' must be configured with an object", server=name)
        protocol_type = _protocol_for_entry(name, entry)
        resolved[name] = (protocol_type, _entry_options(protocol_type, entry))
    return resolved
