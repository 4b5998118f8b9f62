"""
MCP client lifecycle management.

A client wrapper owns one connection to one MCP server: it connects lazily,
discovers and caches the server's tools, forwards tool calls and releases the
connection on close. The transport is chosen by protocol type (see
``transport.py``); the wire protocol itself is handled by fastmcp.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from contextlib import asynccontextmanager
from typing import Any, Callable, Dict, List, Optional, Union

from fastmcp import Client

from .schema import normalize_tools
from .transport import create_transport, describe_server, resolve_config, transport_options
from ..models.config import MCPProtocolType, MCPServerConfig
from ..models.errors import (
    ClientClosedError,
    MCPConnectionError,
    ToolDiscoveryError,
    ToolInvocationError,
)
from ..models.tools import ClientState, MCPTool
from ..utils.logger import log_progress, mcp_logger

logger = logging.getLogger("agent-mcp-client")

CLIENT_NAME = "agent-mcp-client"

ClientFactory = Callable[..., Any]


def _default_client_factory(transport: Any, **options: Any) -> Client:
    return Client(transport, name=CLIENT_NAME, **options)


class MCPClientWrapper(ABC):
    """
    Contract shared by every MCP client lifecycle.

    States move Uninitialized -> Connected -> Closed; Closed is terminal.
    """

    name: str = "mcp-server"

    @property
    @abstractmethod
    def state(self) -> ClientState:
        """Current lifecycle state."""

    @abstractmethod
    async def initialize(self) -> None:
        """Connect to the server. No-op when already connected."""

    @abstractmethod
    async def list_tools(self) -> List[MCPTool]:
        """Return the server's tools, discovering them on first use."""

    @abstractmethod
    async def call_tool(self, tool_name: str, arguments: Optional[Dict[str, Any]] = None) -> Any:
        """Call a tool and return the server's raw result."""

    @abstractmethod
    async def close(self) -> None:
        """Release the connection. No-op unless connected."""

    @property
    def is_connected(self) -> bool:
        return self.state == ClientState.CONNECTED

    async def __aenter__(self):
        """Async context manager entry."""
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()


class FastMCPClientWrapper(MCPClientWrapper):
    """
    MCP client lifecycle backed by a fastmcp Client.

    Concurrent first callers share a single connect attempt and a single
    discovery round trip. Closing waits for in-flight discovery and tool calls
    to finish; calls issued once closing has started are rejected.
    """

    def __init__(
        self,
        protocol_type: Union[MCPProtocolType, str],
        config: Union[MCPServerConfig, Mapping],
        name: Optional[str] = None,
        client_factory: Optional[ClientFactory] = None,
    ):
        """
        Initialize the client wrapper.

        Args:
            protocol_type: Transport mechanism used to reach the server
            config: Configuration matching the protocol type
            name: Label for logs and errors (defaults to the command line or URL)
            client_factory: Builds the protocol client from a transport and
                client options; defaults to ``fastmcp.Client``

        Raises:
            ConfigurationError: If the configuration does not fit the protocol type
        """
        self.protocol_type, self.config = resolve_config(protocol_type, config)
        self.name = name or describe_server(self.protocol_type, self.config)
        self.verbose = self.config.verbose
        self._client_factory = client_factory or _default_client_factory

        self._client: Optional[Any] = None
        self._state = ClientState.UNINITIALIZED
        self._cached_tools: Optional[List[MCPTool]] = None
        self._closing = False

        self._connect_lock = asyncio.Lock()
        self._discovery_lock = asyncio.Lock()
        self._in_flight = 0
        self._idle = asyncio.Event()
        self._idle.set()

    @property
    def state(self) -> ClientState:
        return self._state

    def _log(self, message: str) -> None:
        log_progress(self.verbose, self.name, message, logger)

    def _log_error(self, message: str) -> None:
        logger.error(message)
        if self.verbose:
            mcp_logger.error(message)

    def _closed_error(self) -> ClientClosedError:
        return ClientClosedError(f"MCP client for {self.name} is closed", server=self.name)

    async def initialize(self) -> None:
        if self._closing:
            raise self._closed_error()
        if self._state == ClientState.CONNECTED:
            return

        async with self._connect_lock:
            if self._state == ClientState.CONNECTED:
                return
            if self._state == ClientState.CLOSED:
                raise self._closed_error()

            transport = create_transport(self.protocol_type, self.config)

            try:
                client = self._client_factory(transport, **transport_options(self.config))
                self._log("Connecting to MCP server...")
                await client.__aenter__()
            except Exception as e:
                self._log_error(f"Failed to connect to MCP server {self.name}: {e}")
                raise MCPConnectionError(
                    f"Failed to initialize MCP client for {self.name}: {e}",
                    server=self.name,
                ) from e

            self._client = client
            self._state = ClientState.CONNECTED
            self._log("Connected to MCP server successfully")

    async def _ensure_connected(self) -> None:
        if self._closing:
            raise self._closed_error()
        if self._state != ClientState.CONNECTED:
            await self.initialize()

    @asynccontextmanager
    async def _track_call(self):
        """Count a request as in flight so close() can wait for it."""
        if self._closing or self._state != ClientState.CONNECTED:
            raise self._closed_error()

        self._in_flight += 1
        self._idle.clear()
        try:
            yield self._client
        finally:
            self._in_flight -= 1
            if self._in_flight == 0:
                self._idle.set()

    async def list_tools(self) -> List[MCPTool]:
        await self._ensure_connected()

        if self._cached_tools is not None:
            return list(self._cached_tools)

        async with self._discovery_lock:
            if self._cached_tools is not None:
                return list(self._cached_tools)

            self._log("Requesting tools from MCP server...")
            async with self._track_call() as client:
                try:
                    response = await client.list_tools_mcp()
                except Exception as e:
                    self._log_error(f"Failed to list tools from {self.name}: {e}")
                    raise ToolDiscoveryError(
                        f"Failed to list MCP tools from {self.name}: {e}",
                        server=self.name,
                    ) from e

            tools = normalize_tools(response)
            self._log(f"Processed {len(tools)} tools from MCP server")
            if tools:
                self._log(f"Tool names: {', '.join(tool.name for tool in tools)}")

            self._cached_tools = tools
            return list(tools)

    async def call_tool(self, tool_name: str, arguments: Optional[Dict[str, Any]] = None) -> Any:
        await self._ensure_connected()
        arguments = dict(arguments or {})

        if self.verbose:
            mcp_logger.tool_call(tool_name, arguments)
        else:
            logger.debug(f"Calling MCP tool {tool_name} on {self.name}")

        async with self._track_call() as client:
            try:
                result = await client.call_tool_mcp(tool_name, arguments)
            except Exception as e:
                if self.verbose:
                    mcp_logger.tool_result(tool_name, False, str(e))
                raise ToolInvocationError(
                    tool_name=tool_name,
                    message=f"Failed to call MCP tool {tool_name}: {e}",
                    input_args=arguments,
                    server=self.name,
                ) from e

        if self.verbose:
            mcp_logger.tool_result(tool_name, True)
        else:
            logger.debug(f"MCP tool {tool_name} call successful")

        return result

    async def close(self) -> None:
        if self._state != ClientState.CONNECTED or self._closing:
            return

        self._closing = True
        try:
            await self._idle.wait()

            self._log("Closing MCP client connection")
            try:
                await self._client.close()
            except Exception as e:
                # Reported, never fatal
                self._log_error(f"Error closing MCP client for {self.name}: {e}")
        finally:
            self._client = None
            self._cached_tools = None
            self._state = ClientState.CLOSED
            self._closing = False

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(name='{self.name}', state='{self._state.value}')>"


def create_mcp_client(
    protocol_type: Union[MCPProtocolType, str],
    config: Union[MCPServerConfig, Mapping],
    name: Optional[str] = None,
) -> MCPClientWrapper:
    """
    Create an MCP client wrapper for a server.

    Args:
        protocol_type: Transport mechanism used to reach the server
        config: Configuration matching the protocol type
        name: Optional label for logs and errors

    Returns:
        An unconnected client wrapper
    """
    return FastMCPClientWrapper(protocol_type, config, name=name)
