"""
Error models and exceptions for the agent-mcp framework.

Every exception raised by the framework carries a structured error model
(``exc.error``) so callers can inspect the failure without parsing messages.
"""

from enum import Enum
from typing import Any, Dict, Optional
from pydantic import Field

from .base import TimestampedModel


class ErrorType(str, Enum):
    """Types of errors that can occur in the framework."""

    # Configuration errors
    CONFIGURATION_ERROR = "configuration_error"
    UNSUPPORTED_PROTOCOL = "unsupported_protocol"

    # Connection-related errors
    CONNECTION_ERROR = "connection_error"
    CLIENT_CLOSED = "client_closed"

    # Tool-related errors
    TOOL_DISCOVERY_ERROR = "tool_discovery_error"
    TOOL_EXECUTION_ERROR = "tool_execution_error"
    INVALID_TOOL_INPUT = "invalid_tool_input"


class MCPError(TimestampedModel):
    """
    Client- or server-level error model.
    """
    error_type: ErrorType = Field(..., description="Type of error")
    message: str = Field(..., description="Human-readable error message")
    server: Optional[str] = Field(None, description="Server the error relates to")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional error details")
    recoverable: bool = Field(True, description="Whether retrying may succeed")

    def __str__(self) -> str:
        return self.message


class ToolError(TimestampedModel):
    """
    Tool execution error model.
    """
    tool_name: str = Field(..., description="Name of the tool that failed")
    error_type: ErrorType = Field(..., description="Type of tool error")
    message: str = Field(..., description="Human-readable error message")
    input_args: Dict[str, Any] = Field(default_factory=dict, description="Input arguments that caused the error")
    server: Optional[str] = Field(None, description="Server hosting the tool")
    recoverable: bool = Field(True, description="Whether the error is recoverable")

    def __str__(self) -> str:
        return self.message


class MCPException(Exception):
    """Base exception for client, transport and discovery failures."""

    error_type: ErrorType = ErrorType.CONNECTION_ERROR
    recoverable: bool = True

    def __init__(
        self,
        message: str,
        server: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.error = MCPError(
            error_type=self.error_type,
            message=message,
            server=server,
            details=details,
            recoverable=self.recoverable,
        )
        super().__init__(message)

    @property
    def server(self) -> Optional[str]:
        return self.error.server


class ConfigurationError(MCPException):
    """Malformed URL, mismatched configuration variant or invalid options."""

    error_type = ErrorType.CONFIGURATION_ERROR
    recoverable = False


class UnsupportedProtocolError(ConfigurationError):
    """Protocol type outside the supported set."""

    error_type = ErrorType.UNSUPPORTED_PROTOCOL


class MCPConnectionError(MCPException):
    """Handshake or transport setup failure, or use of a closed client."""

    error_type = ErrorType.CONNECTION_ERROR


class ClientClosedError(MCPConnectionError):
    """The client has been closed, or is closing, and accepts no more requests."""

    error_type = ErrorType.CLIENT_CLOSED
    recoverable = False


class ToolDiscoveryError(MCPException):
    """The tools/list round trip failed."""

    error_type = ErrorType.TOOL_DISCOVERY_ERROR


class ToolException(Exception):
    """Exception class for tool-related errors."""

    def __init__(self, error: ToolError):
        self.error = error
        super().__init__(str(error))

    @property
    def tool_name(self) -> str:
        return self.error.tool_name


class ToolInvocationError(ToolException):
    """The tools/call round trip failed."""

    def __init__(
        self,
        tool_name: str,
        message: str,
        input_args: Optional[Dict[str, Any]] = None,
        server: Optional[str] = None,
    ):
        super().__init__(
            ToolError(
                tool_name=tool_name,
                error_type=ErrorType.TOOL_EXECUTION_ERROR,
                message=message,
                input_args=input_args or {},
                server=server,
            )
        )


class ToolInputError(ToolException):
    """Arguments passed to a tool do not satisfy its parameter list."""

    def __init__(self, tool_name: str, message: str, input_args: Optional[Dict[str, Any]] = None):
        super().__init__(
            ToolError(
                tool_name=tool_name,
                error_type=ErrorType.INVALID_TOOL_INPUT,
                message=message,
                input_args=input_args or {},
                recoverable=False,
            )
        )
