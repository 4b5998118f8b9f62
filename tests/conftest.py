"""
Shared fixtures: fake fastmcp clients injected through the client factory hook.
"""

import asyncio
from typing import Any, Dict, List, Optional

import pytest

from agent_mcp.mcp.client import FastMCPClientWrapper
from agent_mcp.models.config import MCPProtocolType


def make_tools(*names: str) -> Dict[str, Any]:
    """A tools/list envelope with one single-parameter tool per name."""
    return {
        "tools": [
            {
                "name": name,
                "description": f"{name} tool",
                "inputSchema": {
                    "type": "object",
                    "properties": {"value": {"type": "string", "description": "Input value"}},
                    "required": ["value"],
                },
            }
            for name in names
        ]
    }


class FakeMCPClient:
    """Stands in for fastmcp.Client and counts every round trip."""

    def __init__(
        self,
        tools_response: Any = None,
        call_result: Any = None,
        connect_error: Optional[Exception] = None,
        list_error: Optional[Exception] = None,
        call_error: Optional[Exception] = None,
        close_error: Optional[Exception] = None,
    ):
        self.tools_response = tools_response if tools_response is not None else {"tools": []}
        self.call_result = call_result
        self.connect_error = connect_error
        self.list_error = list_error
        self.call_error = call_error
        self.close_error = close_error

        self.connect_count = 0
        self.list_count = 0
        self.close_count = 0
        self.calls: List[tuple] = []
        self.call_gate: Optional[asyncio.Event] = None

    async def __aenter__(self):
        self.connect_count += 1
        await asyncio.sleep(0)
        if self.connect_error:
            raise self.connect_error
        return self

    async def list_tools_mcp(self):
        self.list_count += 1
        await asyncio.sleep(0)
        if self.list_error:
            raise self.list_error
        return self.tools_response

    async def call_tool_mcp(self, name: str, arguments: Dict[str, Any]):
        self.calls.append((name, arguments))
        if self.call_gate is not None:
            await self.call_gate.wait()
        if self.call_error:
            raise self.call_error
        return self.call_result

    async def close(self):
        self.close_count += 1
        if self.close_error:
            raise self.close_error


class FakeClientFactory:
    """Client factory returning a prepared fake and recording its inputs."""

    def __init__(self, client: FakeMCPClient):
        self.client = client
        self.transports: List[Any] = []
        self.options: List[Dict[str, Any]] = []

    def __call__(self, transport: Any, **options: Any) -> FakeMCPClient:
        self.transports.append(transport)
        self.options.append(options)
        return self.client


STDIO_CONFIG = {"command": "python", "args": ["-m", "fake_server"]}


def make_wrapper(
    fake: FakeMCPClient,
    protocol_type: MCPProtocolType = MCPProtocolType.STDIO,
    config: Any = None,
    name: Optional[str] = None,
) -> FastMCPClientWrapper:
    return FastMCPClientWrapper(
        protocol_type,
        config if config is not None else STDIO_CONFIG,
        name=name,
        client_factory=FakeClientFactory(fake),
    )


@pytest.fixture
def fake_client() -> FakeMCPClient:
    return FakeMCPClient(tools_response=make_tools("echo", "reverse"))


@pytest.fixture
def wrapper(fake_client) -> FastMCPClientWrapper:
    return make_wrapper(fake_client, name="fake")
