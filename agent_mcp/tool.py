"""
Generic tool abstraction for the agent-mcp framework.

Every tool handed to the agent runtime, MCP-backed or not, derives from
BaseTool. The runtime invokes ``execute``; subclasses implement ``run``.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from .models.errors import ToolInputError
from .models.tools import ToolParameter, ToolSchema, parameters_to_json_schema


class BaseTool(ABC):
    """
    Abstract base class for all tools exposed to the agent runtime.
    """

    def __init__(
        self,
        name: str,
        description: str,
        parameters: Optional[List[ToolParameter]] = None,
        return_type: Optional[str] = None,
    ):
        """
        Initialize the tool.

        Args:
            name: Tool name (must be unique within a runtime)
            description: Tool description for LLM understanding
            parameters: Ordered parameter list
            return_type: Declared return type, if known
        """
        self.name = name
        self.description = description
        self.parameters: List[ToolParameter] = list(parameters or [])
        self.return_type = return_type

    @abstractmethod
    async def run(self, params: Dict[str, Any]) -> Any:
        """
        Perform the tool's work.

        Args:
            params: Validated parameters

        Returns:
            Tool result
        """

    async def execute(self, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        Invocation entry point used by the agent runtime.

        Raises:
            ToolInputError: If a required parameter is missing
        """
        params = dict(params or {})
        self.validate_input(params)
        return await self.run(params)

    def validate_input(self, params: Dict[str, Any]) -> None:
        """
        Check raw input against the parameter list.

        Raises:
            ToolInputError: If a required parameter is missing
        """
        missing = [p.name for p in self.parameters if p.required and p.name not in params]
        if missing:
            raise ToolInputError(
                tool_name=self.name,
                message=f"Missing required parameter(s) for tool '{self.name}': {', '.join(missing)}",
                input_args=params,
            )

    def get_schema(self) -> ToolSchema:
        """
        Get the tool schema for registration with an LLM provider.
        """
        output_schema = {"type": self.return_type} if self.return_type else None
        return ToolSchema(
            name=self.name,
            description=self.description,
            input_schema=parameters_to_json_schema(self.parameters),
            output_schema=output_schema,
        )

    def __str__(self) -> str:
        return f"Tool({self.name}): {self.description}"

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(name='{self.name}')>"
