"""
Normalization of tool listings reported by MCP servers.

Servers describe tool parameters in several shapes: a flat parameter array,
a JSON-Schema object under ``parameters``, or a JSON-Schema object under
``inputSchema``. Everything is reduced here to one ordered list of
ToolParameter.
"""

from collections.abc import Mapping
from typing import Any, List

from pydantic import BaseModel

from ..models.tools import MCPTool, ToolParameter


def to_json_value(payload: Any) -> Any:
    """
    Convert a protocol payload to plain JSON values.

    Pydantic models (the fastmcp/mcp result types) are dumped using their wire
    field names; lists and tuples are converted element-wise; everything else is
    returned as is.
    """
    if isinstance(payload, BaseModel):
        return payload.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(payload, (list, tuple)):
        return [to_json_value(item) for item in payload]
    return payload


def extract_tool_records(payload: Any) -> List[Any]:
    """
    Get the tool records out of a tools/list response.

    Accepts a bare sequence of records or an envelope exposing a ``tools``
    sequence. Any other shape yields an empty list.
    """
    payload = to_json_value(payload)

    if isinstance(payload, list):
        return payload

    if isinstance(payload, Mapping) and isinstance(payload.get("tools"), list):
        return payload["tools"]

    return []


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _type_name(value: Any) -> str:
    # JSON Schema allows a list of types, e.g. ["string", "null"]
    if isinstance(value, list):
        names = [item for item in value if isinstance(item, str)]
        return "|".join(names) or "string"
    return value if isinstance(value, str) and value else "string"


def _schema_parameters(schema: Mapping) -> List[ToolParameter]:
    required = schema.get("required")
    required_names = {n for n in required if isinstance(n, str)} if isinstance(required, list) else set()

    parameters = []
    for name, prop in schema["properties"].items():
        if not _text(name):
            continue
        prop = prop if isinstance(prop, Mapping) else {}
        parameters.append(
            ToolParameter(
                name=name,
                description=_text(prop.get("description")),
                type=_type_name(prop.get("type")),
                required=name in required_names,
            )
        )
    return parameters


def _has_properties(schema: Any) -> bool:
    return isinstance(schema, Mapping) and isinstance(schema.get("properties"), Mapping)


def extract_parameters(record: Mapping) -> List[ToolParameter]:
    """
    Build the canonical parameter list for one tool record.

    Tries, in order: an array-shaped ``parameters`` field, a JSON-Schema
    object under ``parameters``, a JSON-Schema object under ``inputSchema``.
    A record matching none of them takes no parameters.
    """
    raw_parameters = record.get("parameters")

    if isinstance(raw_parameters, list):
        parameters = []
        for entry in raw_parameters:
            if not isinstance(entry, Mapping) or not _text(entry.get("name")):
                continue
            parameters.append(
                ToolParameter(
                    name=entry["name"],
                    description=_text(entry.get("description")),
                    type=_type_name(entry.get("type")),
                    required=bool(entry.get("required", False)),
                )
            )
        return parameters

    if _has_properties(raw_parameters):
        return _schema_parameters(raw_parameters)

    input_schema = record.get("inputSchema", record.get("input_schema"))
    if _has_properties(input_schema):
        return _schema_parameters(input_schema)

    return []


def normalize_tool(record: Any) -> MCPTool:
    """
    Convert one raw tool record into an MCPTool descriptor.

    Name and description default to the empty string. The return type is
    never populated: no server format reports it reliably.
    """
    record = to_json_value(record)
    if not isinstance(record, Mapping):
        return MCPTool()

    return MCPTool(
        name=_text(record.get("name")),
        description=_text(record.get("description")),
        parameters=extract_parameters(record),
    )


def normalize_tools(payload: Any) -> List[MCPTool]:
    """Normalize a whole tools/list response."""
    return [normalize_tool(record) for record in extract_tool_records(payload)]

