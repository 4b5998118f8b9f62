"""
Tool-related models for the agent-mcp framework.
"""

from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import Field

from .base import BaseFrameworkModel


class ClientState(str, Enum):
    """Lifecycle state of an MCP client connection."""
    UNINITIALIZED = "uninitialized"
    CONNECTED = "connected"
    CLOSED = "closed"


class ToolParameter(BaseFrameworkModel):
    """
    One named argument accepted by a tool.
    """
    name: str = Field(..., min_length=1, description="Parameter name")
    description: str = Field("", description="Parameter description")
    type: str = Field("string", description="JSON type of the parameter")
    required: bool = Field(False, description="Whether the parameter must be supplied")

    class Config:
        frozen = True


class MCPTool(BaseFrameworkModel):
    """
    Normalized description of one tool discovered on an MCP server.
    """
    name: str = Field("", description="Tool name")
    description: str = Field("", description="Tool description")
    parameters: List[ToolParameter] = Field(default_factory=list, description="Ordered parameter list")
    return_type: Optional[str] = Field(None, description="Declared return type, if any")

    class Config:
        frozen = True


class ToolSchema(BaseFrameworkModel):
    """
    Schema definition for a tool.
    """
    name: str = Field(..., description="Tool name")
    description: str = Field(..., description="Tool description")
    input_schema: Dict[str, Any] = Field(..., description="JSON schema for input validation")
    output_schema: Optional[Dict[str, Any]] = Field(None, description="JSON schema for output validation")

    def to_openai_format(self) -> Dict[str, Any]:
        """Convert to OpenAI function calling format."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.input_schema
            }
        }

    def to_anthropic_format(self) -> Dict[str, Any]:
        """Convert to Anthropic tool format."""
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": self.input_schema
        }


def parameters_to_json_schema(parameters: List[ToolParameter]) -> Dict[str, Any]:
    """Render a parameter list as a JSON-Schema object."""
    return {
        "type": "object",
        "properties": {
            param.name: {
                "type": param.type.split("|") if "|" in param.type else param.type,
                "description": param.description,
            }
            for param in parameters
        },
        "required": [param.name for param in parameters if param.required],
    }
