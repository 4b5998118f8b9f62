"""
MCP Tool Adapter exposing remote MCP tools as framework tools.

This module wraps each tool discovered on an MCP server as a BaseTool,
forwarding invocations through the owning client and turning JSON text
content in the result into readable ``key: value`` lines.
"""

import json
import logging
from collections.abc import Mapping
from typing import Any, Dict, Optional

from ..client import MCPClientWrapper
from ..schema import to_json_value
from ...models.tools import MCPTool
from ...tool import BaseTool

logger = logging.getLogger("agent-mcp-tool-adapter")

NO_DATA = "No data available"
EMPTY_OBJECT = "Empty object"
FORMAT_ERROR = "Error formatting object data"


def _format_scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    # JSON numbers: 1.0 renders as 1
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _dump(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False)


def format_object_as_text(value: Any) -> str:
    """
    Render structured data as readable text.

    Each key/value pair becomes one line; pairs whose value is None or the
    empty string are skipped. Nested values are rendered as indented JSON.
    Never raises: failures fall back to a JSON dump, then to a placeholder.

    Args:
        value: Object (or array) to render

    Returns:
        Formatted text
    """
    if value is None:
        return NO_DATA

    try:
        if isinstance(value, Mapping):
            items = list(value.items())
        elif isinstance(value, (list, tuple)):
            items = list(enumerate(value))
        else:
            items = []

        entries = []
        for key, item in items:
            if item is None or (isinstance(item, str) and item == ""):
                continue
            if isinstance(item, (Mapping, list, tuple)):
                entries.append(f"{key}: {_dump(item)}")
            else:
                entries.append(f"{key}: {_format_scalar(item)}")

        if entries:
            return "\n".join(entries)
    except Exception as e:
        logger.debug(f"Falling back to JSON dump while formatting result: {e}")
        try:
            return _dump(value)
        except Exception:
            return FORMAT_ERROR

    return EMPTY_OBJECT


def _render_text(text: Any) -> Optional[str]:
    """
    Rendered replacement for one text content value, or None to keep it.

    Only JSON objects, arrays and null are rendered; JSON scalars such as
    ``42`` or ``true`` are kept as the server sent them.
    """
    if isinstance(text, str):
        try:
            parsed = json.loads(text)
        except ValueError:
            # Plain text, not JSON
            return None
        if parsed is None or isinstance(parsed, (dict, list)):
            return format_object_as_text(parsed)
        return None

    if isinstance(text, (Mapping, list, tuple)):
        return format_object_as_text(text)

    return None


def reshape_result(result: Any) -> Any:
    """
    Reshape a raw tools/call result for display.

    The result is converted to plain JSON values. Text entries of its
    ``content`` list holding JSON objects are replaced with their text
    rendering; everything else is returned unchanged.
    """
    payload = to_json_value(result)
    if not isinstance(payload, Mapping):
        return payload

    content = payload.get("content")
    if not isinstance(content, list):
        return payload

    reshaped = []
    for item in content:
        if isinstance(item, Mapping) and item.get("type") == "text":
            rendered = _render_text(item.get("text"))
            if rendered is not None:
                item = {**item, "text": rendered}
        reshaped.append(item)

    return {**payload, "content": reshaped}


class MCPToolWrapper(BaseTool):
    """
    A BaseTool that runs a tool hosted on an MCP server.

    The wrapper does not own its client; the manager that created it closes
    the client only after dropping its wrappers.
    """

    def __init__(self, mcp_tool: MCPTool, mcp_client: MCPClientWrapper):
        """
        Args:
            mcp_tool: Tool definition discovered on the MCP server
            mcp_client: Connection to the MCP server
        """
        super().__init__(
            name=mcp_tool.name,
            description=mcp_tool.description,
            parameters=mcp_tool.parameters,
            return_type=mcp_tool.return_type,
        )
        self.mcp_tool = mcp_tool
        self.mcp_client = mcp_client

    async def run(self, params: Dict[str, Any]) -> Any:
        """
        Run the MCP tool.

        Raises:
            ToolInvocationError: If the call to the server fails
        """
        result = await self.mcp_client.call_tool(self.mcp_tool.name, params)
        return reshape_result(result)
