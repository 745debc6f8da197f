"""
02_custom_tool.py - Define a tool with @tool and run turns in a TaskPool
"""

import asyncio
from datetime import datetime
from typing import Annotated

from picoclaw import AgentExecutor, TaskPool, ToolRegistry, create_client, tool


@tool
async def current_time(
    fmt: Annotated[str, "strftime format string"] = "%Y-%m-%d %H:%M",
) -> str:
    """Return the current local time."""
    return datetime.now().strftime(fmt)


async def main():
    registry = ToolRegistry()
    registry.register(current_time)

    llm = create_client("ollama", "llama3.1")
    executor = AgentExecutor(llm_client=llm, tool_registry=registry, max_iterations=3)
    pool = TaskPool(max_concurrent=2)

    questions = ["What time is it?", "What is today's date?"]
    handles = [pool.spawn(executor.execute(q), default="") for q in questions]

    for question, answer in zip(questions, await asyncio.gather(*handles)):
        print(f"User: {question}")
        print(f"Agent: {answer}")

    await pool.shutdown(timeout=5.0)
    await llm.close()


if __name__ == "__main__":
    asyncio.run(main())
