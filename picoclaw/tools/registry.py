"""
PicoClaw Tool Registry - Central catalog of the tools an agent can call
"""

import logging
import threading
import time
from typing import Any, Dict, List, Optional

from ..audit import AuditLogger
from ..errors import ToolExecutionError, ToolNotFoundError
from .base import BaseTool
from .models import ToolDefinition, ToolResult

logger = logging.getLogger(__name__)


class ToolRegistry:
    """
    Registry for managing and executing tools

    Registration is serialized by a lock and published copy-on-write: the
    mapping is rebuilt with the new entry and swapped in, so readers never
    see a half-inserted tool and never take the lock.

    Usage:
        registry = ToolRegistry()
        registry.register(WriteFileTool(workspace="./workspace"))
        definitions = registry.list_definitions()
        result = await registry.execute("write_file", {"path": "a.txt", "content": "hi"})
    """

    def __init__(self, audit: Optional[AuditLogger] = None):
        self._tools: Dict[str, BaseTool] = {}
        self._lock = threading.Lock()
        self._audit = audit or AuditLogger()

    def register(self, tool: BaseTool) -> None:
        """
        Register a tool. The last registration for a name wins.

        Args:
            tool: Tool instance to register
        """
        if not tool.name:
            raise ValueError(f"Tool {tool!r} has no name")

        with self._lock:
            replaced = tool.name in self._tools
            tools = dict(self._tools)
            tools[tool.name] = tool
            self._tools = tools

        if replaced:
            logger.warning(f"Tool '{tool.name}' already registered, overwriting")
        logger.info(f"Registered tool: {tool.name}")

    def unregister(self, name: str) -> bool:
        """
        Unregister a tool by name

        Returns:
            True if tool was unregistered, False if not found
        """
        with self._lock:
            if name not in self._tools:
                return False
            tools = dict(self._tools)
            del tools[name]
            self._tools = tools
        logger.info(f"Unregistered tool: {name}")
        return True

    def get(self, name: str) -> Optional[BaseTool]:
        """Get a tool by name, or None if not registered"""
        return self._tools.get(name)

    def require(self, name: str) -> BaseTool:
        """Get a tool by name or raise ToolNotFoundError"""
        tool = self._tools.get(name)
        if tool is None:
            raise ToolNotFoundError(name)
        return tool

    def has_tool(self, name: str) -> bool:
        return name in self._tools

    async def execute(self, name: str, arguments: Dict[str, Any]) -> ToolResult:
        """
        Execute a tool by name.

        Never raises for tool problems: an unknown name or a failing tool
        yields a ToolResult with is_error=True.

        Args:
            name: Tool name
            arguments: Decoded tool arguments

        Returns:
            ToolResult
        """
        logger.info(f"Tool execution started: {name}")

        try:
            tool = self.require(name)
        except ToolNotFoundError as e:
            logger.error(f"Tool not found: {name}")
            return ToolResult.error(str(e))

        start = time.monotonic()
        try:
            result = await tool.execute(dict(arguments or {}))
            if not isinstance(result, ToolResult):
                raise TypeError(
                    f"Tool '{name}' returned {type(result).__name__}, expected ToolResult"
                )
            if not isinstance(result.for_llm, str):
                raise TypeError(
                    f"Tool '{name}' returned for_llm of type "
                    f"{type(result.for_llm).__name__}, expected str"
                )
        except ToolExecutionError as e:
            result = ToolResult.error(str(e))
        except Exception as e:
            logger.error(f"Tool '{name}' raised: {e}", exc_info=True)
            result = ToolResult.error(f"Error executing {name}: {e}")
        duration_ms = int((time.monotonic() - start) * 1000)

        if result.is_error:
            logger.error(f"Tool execution failed: {name} ({duration_ms}ms)")
        else:
            logger.info(
                f"Tool execution completed: {name} ({duration_ms}ms, {len(result.for_llm)} chars)"
            )

        self._audit.log_tool_execution(
            tool_name=name,
            success=not result.is_error,
            duration_ms=duration_ms,
            output_chars=len(result.for_llm),
            error=result.for_llm if result.is_error else None,
        )
        return result

    def list_definitions(self) -> List[ToolDefinition]:
        """Public schemas of all registered tools, sorted by name"""
        tools = self._tools
        return [tools[name].to_definition() for name in sorted(tools)]

    def list_names(self) -> List[str]:
        return sorted(self._tools)

    def count(self) -> int:
        return len(self._tools)

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __repr__(self) -> str:
        return f"<ToolRegistry tools={len(self._tools)}>"
