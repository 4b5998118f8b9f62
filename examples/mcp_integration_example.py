"""
Example connecting MCP servers and running their tools.

Shows a single client used directly, and a manager pooling the tools of
every server listed in an ``mcpServers`` configuration file.
"""

import asyncio
import json
import os
import sys
from pathlib import Path

from agent_mcp import MCPManager, MCPProtocolType, MCPStdioConfig, ToolException, create_mcp_client
from agent_mcp.models.errors import MCPException


async def direct_client_example():
    """Example using one MCP client directly."""
    print("🔧 Direct MCP Client Example")
    print("=" * 50)

    # Any stdio MCP server works here; this one ships with the reference servers
    config = MCPStdioConfig(
        command="npx",
        args=["-y", "@modelcontextprotocol/server-everything"],
        verbose=True,
    )

    async with create_mcp_client(MCPProtocolType.STDIO, config, name="everything") as client:
        tools = await client.list_tools()
        print(f"📋 Available tools: {len(tools)}")
        for tool in tools:
            params = ", ".join(f"{p.name}: {p.type}" for p in tool.parameters)
            print(f"  - {tool.name}({params}): {tool.description}")

        result = await client.call_tool("echo", {"message": "hello from agent-mcp"})
        print(f"\n📄 Raw result: {result}")


async def manager_example(config_path: Path):
    """Example pooling the tools of several servers."""
    print("\n🧰 MCP Manager Example")
    print("=" * 50)

    async with MCPManager() as manager:
        await manager.add_servers_from_config(config_path)

        print(f"✅ Connected to {len(manager.clients)} MCP servers")
        for schema in manager.get_available_tools():
            print(f"  - {schema['function']['name']}: {schema['function']['description']}")

        tool = manager.get_tool("echo")
        if tool is None:
            print("⚠️  No 'echo' tool available")
            return

        try:
            result = await tool.execute({"message": json.dumps({"status": "ok", "items": 3})})
            print("\n✅ Tool execution successful!")
            for item in result["content"]:
                print(item.get("text", item))
        except ToolException as e:
            print(f"❌ Tool execution failed: {e}")


async def main():
    """Run MCP integration examples."""
    print("🚀 MCP Integration Examples")
    print("=" * 60)

    try:
        await direct_client_example()

        config_path = Path(os.getenv("MCP_CONFIG", "mcp.json"))
        if config_path.exists():
            await manager_example(config_path)
        else:
            print(f"\n⚠️  {config_path} not found, skipping manager example")
            print('   Example: {"mcpServers": {"everything": {"command": "npx", '
                  '"args": ["-y", "@modelcontextprotocol/server-everything"]}}}')
    except MCPException as e:
        print(f"❌ MCP error ({e.error.error_type}): {e}")
        sys.exit(1)

    print("\n🎉 MCP integration examples completed!")


if __name__ == "__main__":
    asyncio.run(main())
