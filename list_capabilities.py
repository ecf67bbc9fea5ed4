"""列出 Commerce Reports MCP 服务器提供的工具与资源"""

import asyncio
import sys
from mcp import ClientSession, StdioServerParameters
from mcp.client.stdio import stdio_client

async def main():
    print("🔍 连接 MCP 服务器，获取可用能力...")
    print("=" * 60)

    params = StdioServerParameters(
        command=sys.executable,
        args=["-m", "commerce_reports.mcp_server", "stdio"],
    )

    async with stdio_client(params) as (read, write):
        async with ClientSession(read, write) as session:
            await session.initialize()

            tools = await session.list_tools()
            print(f"\n📦 报表工具 ({len(tools.tools)} 个):")
            print("-" * 60)
            for tool in tools.tools:
                print(f"  • {tool.name}")
                if tool.description:
                    print(f"    {tool.description.splitlines()[0]}")
                params_schema = (tool.inputSchema or {}).get("properties", {})
                if params_schema:
                    print(f"    参数: {', '.join(params_schema)}")
                print()

            resources = await session.list_resources()
            print(f"\n📚 可用资源 ({len(resources.resources)} 个):")
            print("-" * 60)
            for resource in resources.resources:
                print(f"  • {resource.uri}")
                if resource.description:
                    print(f"    说明: {resource.description}")
                print()

if __name__ == "__main__":
    asyncio.run(main())
