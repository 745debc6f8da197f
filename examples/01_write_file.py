"""
01_write_file.py - One agent turn with the built-in write_file tool
"""

import asyncio

from picoclaw import AgentExecutor, ToolRegistry, WriteFileTool, create_client


async def main():
    registry = ToolRegistry()
    registry.register(WriteFileTool(workspace="./workspace"))

    async with create_client("openai", "gpt-4o-mini", api_key="sk-xxx") as llm:
        executor = AgentExecutor(llm_client=llm, tool_registry=registry)

        print("User: Create hello.txt containing 'hi'")
        result = await executor.run("Create hello.txt containing 'hi'")
        print(f"Agent: {result.response}")
        print(f"({result.iterations} iterations, tools: {[c.name for c in result.tool_calls]})")


if __name__ == "__main__":
    asyncio.run(main())
