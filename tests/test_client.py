"""
Tests for the MCP client lifecycle.
"""

import asyncio

import pytest

from agent_mcp.mcp.client import FastMCPClientWrapper, create_mcp_client
from agent_mcp.models.config import MCPProtocolType, MCPStdioConfig
from agent_mcp.models.errors import (
    ClientClosedError,
    ConfigurationError,
    ErrorType,
    MCPConnectionError,
    ToolDiscoveryError,
    ToolInvocationError,
)
from agent_mcp.models.tools import ClientState
from agent_mcp.utils.logger import mcp_logger

from conftest import STDIO_CONFIG, FakeMCPClient, FakeClientFactory, make_tools, make_wrapper


class TestConstruction:

    def test_create_mcp_client_starts_uninitialized(self):
        client = create_mcp_client(MCPProtocolType.STDIO, MCPStdioConfig(command="python", args=["srv.py"]))

        assert isinstance(client, FastMCPClientWrapper)
        assert client.state == ClientState.UNINITIALIZED
        assert client.name == "python srv.py"
        assert not client.is_connected

    def test_mismatched_config_fails_fast(self):
        with pytest.raises(ConfigurationError):
            create_mcp_client("sse", MCPStdioConfig(command="python"))

    def test_verbose_flag_comes_from_config(self):
        client = create_mcp_client("sse", {"url": "http://localhost/sse", "verbose": True}, name="remote")

        assert client.verbose is True
        assert client.name == "remote"


class TestInitialize:

    @pytest.mark.asyncio
    async def test_initialize_is_idempotent(self, wrapper, fake_client):
        await wrapper.initialize()
        await wrapper.initialize()

        assert fake_client.connect_count == 1
        assert wrapper.state == ClientState.CONNECTED

    @pytest.mark.asyncio
    async def test_concurrent_initialize_shares_one_connect(self, wrapper, fake_client):
        await asyncio.gather(*(wrapper.initialize() for _ in range(5)))

        assert fake_client.connect_count == 1
        assert wrapper.state == ClientState.CONNECTED

    @pytest.mark.asyncio
    async def test_streamable_http_timeout_reaches_client(self):
        fake = FakeMCPClient()
        factory = FakeClientFactory(fake)
        client = FastMCPClientWrapper(
            "streamable_http",
            {"baseUrl": "http://localhost:8000/mcp", "timeout": 3},
            client_factory=factory,
        )

        await client.initialize()

        assert factory.options == [{"timeout": 3}]
        assert factory.transports[0].url == "http://localhost:8000/mcp"

    @pytest.mark.asyncio
    async def test_failed_connect_wraps_cause_and_allows_retry(self):
        fake = FakeMCPClient(connect_error=OSError("spawn failed"))
        client = make_wrapper(fake, name="broken")

        with pytest.raises(MCPConnectionError) as exc_info:
            await client.initialize()

        assert "spawn failed" in str(exc_info.value)
        assert exc_info.value.server == "broken"
        assert isinstance(exc_info.value.__cause__, OSError)
        assert client.state == ClientState.UNINITIALIZED

        fake.connect_error = None
        await client.initialize()

        assert client.state == ClientState.CONNECTED
        assert fake.connect_count == 2

    @pytest.mark.asyncio
    async def test_configuration_error_is_not_wrapped(self):
        client = make_wrapper(FakeMCPClient(), protocol_type="sse", config={"url": "nowhere"})

        with pytest.raises(ConfigurationError):
            await client.initialize()

        assert client.state == ClientState.UNINITIALIZED


class TestListTools:

    @pytest.mark.asyncio
    async def test_lazy_connect_and_cache(self, wrapper, fake_client):
        first = await wrapper.list_tools()
        second = await wrapper.list_tools()

        assert fake_client.connect_count == 1
        assert fake_client.list_count == 1
        assert first == second
        assert all(a is b for a, b in zip(first, second))
        assert [t.name for t in first] == ["echo", "reverse"]
        assert first[0].parameters[0].required is True

    @pytest.mark.asyncio
    async def test_concurrent_discovery_shares_one_round_trip(self, wrapper, fake_client):
        results = await asyncio.gather(*(wrapper.list_tools() for _ in range(4)))

        assert fake_client.list_count == 1
        assert all(r == results[0] for r in results)

    @pytest.mark.asyncio
    async def test_returned_list_does_not_alias_cache(self, wrapper):
        tools = await wrapper.list_tools()
        tools.clear()

        assert len(await wrapper.list_tools()) == 2

    @pytest.mark.asyncio
    async def test_bare_array_response(self):
        fake = FakeMCPClient(tools_response=make_tools("a", "b", "c")["tools"])
        client = make_wrapper(fake)

        assert [t.name for t in await client.list_tools()] == ["a", "b", "c"]

    @pytest.mark.asyncio
    async def test_unrecognized_response_yields_no_tools(self):
        fake = FakeMCPClient(tools_response={"unexpected": True})
        client = make_wrapper(fake)

        assert await client.list_tools() == []

    @pytest.mark.asyncio
    async def test_discovery_failure(self):
        fake = FakeMCPClient(list_error=RuntimeError("boom"))
        client = make_wrapper(fake, name="srv")

        with pytest.raises(ToolDiscoveryError) as exc_info:
            await client.list_tools()

        assert "boom" in str(exc_info.value)
        assert exc_info.value.error.error_type == ErrorType.TOOL_DISCOVERY_ERROR

        fake.list_error = None
        assert len(await client.list_tools()) == 0


class TestCallTool:

    @pytest.mark.asyncio
    async def test_forwards_call_and_returns_raw_result(self, wrapper, fake_client):
        raw = {"content": [{"type": "text", "text": "{\"a\": 1}"}]}
        fake_client.call_result = raw

        result = await wrapper.call_tool("echo", {"value": "hi"})

        assert result is raw
        assert fake_client.calls == [("echo", {"value": "hi"})]
        assert fake_client.connect_count == 1

    @pytest.mark.asyncio
    async def test_missing_arguments_become_empty_mapping(self, wrapper, fake_client):
        await wrapper.call_tool("echo")

        assert fake_client.calls == [("echo", {})]

    @pytest.mark.asyncio
    async def test_failure_names_tool_and_keeps_cache(self, wrapper, fake_client):
        tools = await wrapper.list_tools()
        fake_client.call_error = ConnectionResetError("server unreachable")

        with pytest.raises(ToolInvocationError) as exc_info:
            await wrapper.call_tool("reverse", {"value": "abc"})

        error = exc_info.value
        assert error.tool_name == "reverse"
        assert "reverse" in str(error)
        assert "server unreachable" in str(error)
        assert error.error.input_args == {"value": "abc"}

        assert await wrapper.list_tools() == tools
        assert fake_client.list_count == 1


class TestClose:

    @pytest.mark.asyncio
    async def test_close_releases_and_is_terminal(self, wrapper, fake_client):
        await wrapper.list_tools()
        await wrapper.close()

        assert wrapper.state == ClientState.CLOSED
        assert fake_client.close_count == 1

        with pytest.raises(ClientClosedError):
            await wrapper.initialize()
        with pytest.raises(MCPConnectionError):
            await wrapper.list_tools()

    @pytest.mark.asyncio
    async def test_close_is_noop_unless_connected(self, wrapper, fake_client):
        await wrapper.close()

        assert wrapper.state == ClientState.UNINITIALIZED
        assert fake_client.close_count == 0

        await wrapper.initialize()
        await wrapper.close()
        await wrapper.close()

        assert fake_client.close_count == 1

    @pytest.mark.asyncio
    async def test_close_failure_is_reported_not_raised(self, wrapper, fake_client, caplog):
        fake_client.close_error = RuntimeError("pipe already closed")
        await wrapper.initialize()

        await wrapper.close()

        assert wrapper.state == ClientState.CLOSED
        assert "pipe already closed" in caplog.text

    @pytest.mark.asyncio
    async def test_close_waits_for_in_flight_call(self, wrapper, fake_client):
        fake_client.call_result = {"content": []}
        fake_client.call_gate = asyncio.Event()
        await wrapper.initialize()

        call = asyncio.create_task(wrapper.call_tool("echo", {"value": "x"}))
        await asyncio.sleep(0)
        closing = asyncio.create_task(wrapper.close())
        await asyncio.sleep(0)

        assert not closing.done()
        assert fake_client.close_count == 0

        with pytest.raises(ClientClosedError) as exc_info:
            await wrapper.call_tool("echo", {"value": "late"})
        assert exc_info.value.error.error_type == ErrorType.CLIENT_CLOSED
        with pytest.raises(ClientClosedError):
            await wrapper.initialize()

        fake_client.call_gate.set()
        assert await call == {"content": []}
        await closing

        assert fake_client.close_count == 1
        assert wrapper.state == ClientState.CLOSED

    @pytest.mark.asyncio
    async def test_verbose_errors_reach_colored_channel(self, monkeypatch):
        reported = []
        monkeypatch.setattr(mcp_logger, "error", reported.append)
        fake = FakeMCPClient(list_error=RuntimeError("boom"), close_error=RuntimeError("pipe"))
        client = make_wrapper(fake, config={**STDIO_CONFIG, "verbose": True}, name="loud")

        with pytest.raises(ToolDiscoveryError):
            await client.list_tools()
        await client.close()

        assert reported == [
            "Failed to list tools from loud: boom",
            "Error closing MCP client for loud: pipe",
        ]

    @pytest.mark.asyncio
    async def test_quiet_errors_stay_off_colored_channel(self, monkeypatch, wrapper, fake_client):
        reported = []
        monkeypatch.setattr(mcp_logger, "error", reported.append)
        fake_client.connect_error = OSError("refused")

        with pytest.raises(MCPConnectionError):
            await wrapper.initialize()

        assert reported == []

    @pytest.mark.asyncio
    async def test_async_context_manager(self, fake_client):
        async with make_wrapper(fake_client) as client:
            assert client.state == ClientState.CONNECTED

        assert client.state == ClientState.CLOSED
