"""
Transport selection for MCP client connections.

Builds a fastmcp client transport for a protocol type and its matching
configuration. Nothing here opens a connection; the transport is only
prepared and is connected later by the owning client.
"""

import logging
from collections.abc import Mapping
from typing import Any, Dict, Tuple, Union

from fastmcp.client.transports import (
    ClientTransport,
    SSETransport,
    StdioTransport,
    StreamableHttpTransport,
)
from pydantic import AnyHttpUrl, AnyUrl, TypeAdapter, ValidationError

from ..models.config import (
    PROTOCOL_CONFIGS,
    MCPProtocolType,
    MCPServerConfig,
    MCPSseConfig,
    MCPStdioConfig,
    MCPStreamableHttpConfig,
)
from ..models.errors import ConfigurationError, UnsupportedProtocolError
from ..utils.logger import log_progress

logger = logging.getLogger("agent-mcp-transport")

_HTTP_URL = TypeAdapter(AnyHttpUrl)


def resolve_protocol(protocol_type: Union[MCPProtocolType, str]) -> MCPProtocolType:
    """Coerce a protocol tag into an MCPProtocolType."""
    try:
        return MCPProtocolType(protocol_type)
    except (ValueError, TypeError):
        raise UnsupportedProtocolError(f"Unsupported MCP protocol type: {protocol_type}") from None


def resolve_config(
    protocol_type: Union[MCPProtocolType, str],
    config: Union[MCPServerConfig, Mapping],
) -> Tuple[MCPProtocolType, MCPServerConfig]:
    """
    Pair a protocol tag with a validated configuration variant.

    Args:
        protocol_type: Protocol tag, enum member or its string value
        config: Configuration model, or a mapping validated into the
            variant the protocol type selects

    Returns:
        Tuple of (protocol type, configuration model)

    Raises:
        UnsupportedProtocolError: If the tag is not a known protocol type
        ConfigurationError: If the configuration does not fit the protocol type
    """
    ptype = resolve_protocol(protocol_type)
    config_cls = PROTOCOL_CONFIGS[ptype]

    if isinstance(config, Mapping):
        try:
            return ptype, config_cls.model_validate(dict(config))
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid {ptype.value} configuration: {e}"
            ) from e

    if not isinstance(config, config_cls):
        raise ConfigurationError(
            f"Configuration {type(config).__name__} does not match protocol type "
            f"'{ptype.value}' (expected {config_cls.__name__})"
        )

    return ptype, config


def parse_url(value: Union[str, AnyUrl]) -> AnyHttpUrl:
    """
    Parse an HTTP(S) URL.

    Raises:
        ConfigurationError: If the value is not a valid HTTP(S) URL
    """
    try:
        return _HTTP_URL.validate_python(str(value))
    except ValidationError as e:
        raise ConfigurationError(f"Invalid MCP server URL '{value}': {e.errors()[0]['msg']}") from e


def describe_server(protocol_type: MCPProtocolType, config: MCPServerConfig) -> str:
    """Short label identifying a server in logs and error messages."""
    if isinstance(config, MCPStdioConfig):
        return " ".join([config.command, *config.args])
    if isinstance(config, MCPSseConfig):
        return config.url
    if isinstance(config, MCPStreamableHttpConfig):
        return str(config.base_url)
    return str(protocol_type)


def create_transport(
    protocol_type: Union[MCPProtocolType, str],
    config: Union[MCPServerConfig, Mapping],
) -> ClientTransport:
    """
    Create the fastmcp transport for a server.

    Args:
        protocol_type: Which transport mechanism to use
        config: Configuration matching the protocol type

    Returns:
        A transport ready to be handed to a fastmcp Client

    Raises:
        UnsupportedProtocolError: If the protocol type is unknown
        ConfigurationError: If the configuration is invalid for the protocol
    """
    ptype, config = resolve_config(protocol_type, config)
    label = describe_server(ptype, config)

    if ptype == MCPProtocolType.STDIO:
        log_progress(config.verbose, label, f"Creating STDIO transport with command: {label}", logger)
        return StdioTransport(
            command=config.command,
            args=list(config.args),
            env=dict(config.env) if config.env is not None else None,
            keep_alive=False,
        )

    if ptype == MCPProtocolType.SSE:
        log_progress(config.verbose, label, f"Creating SSE transport with URL: {config.url}", logger)
        # Validate only; the endpoint is passed through exactly as configured
        parse_url(config.url)
        return SSETransport(url=config.url, headers=config.headers)

    if ptype == MCPProtocolType.STREAMABLE_HTTP:
        log_progress(config.verbose, label, f"Creating Streamable HTTP transport with URL: {label}", logger)
        url = parse_url(config.base_url)
        return StreamableHttpTransport(url=str(url), headers=config.headers)

    raise UnsupportedProtocolError(f"Unsupported MCP protocol type: {ptype}")


def transport_options(config: MCPServerConfig) -> Dict[str, Any]:
    """Client-level options that accompany a transport (request timeout)."""
    if isinstance(config, MCPStreamableHttpConfig) and config.timeout is not None:
        return {"timeout": config.timeout}
    return {}
