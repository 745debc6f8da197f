"""
PicoClaw Tools - Tool calling system for the agent loop

Provides:
- BaseTool: Interface every tool implements
- ToolDefinition / ToolCall / ToolResult: Data structures
- ToolRegistry: Register, look up and execute tools
- @tool decorator: Build tools from typed async functions
- WriteFileTool: Built-in workspace file writer

Usage:
    from picoclaw.tools import ToolRegistry, WriteFileTool, tool

    registry = ToolRegistry()
    registry.register(WriteFileTool(workspace="./workspace"))

    @tool
    async def shout(text: str) -> str:
        '''Upper-case the text'''
        return text.upper()

    registry.register(shout)
"""

from .models import ToolCall, ToolDefinition, ToolResult
from .base import BaseTool
from .registry import ToolRegistry
from .decorator import FunctionTool, tool
from .write_file import WriteFileTool

__all__ = [
    # Models
    "ToolCall",
    "ToolDefinition",
    "ToolResult",
    # Tools
    "BaseTool",
    "FunctionTool",
    "WriteFileTool",
    "tool",
    # Registry
    "ToolRegistry",
]
