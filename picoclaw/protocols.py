"""
PicoClaw Protocols - Abstract interfaces for dependency injection

The agent loop depends on this contract rather than on a concrete adapter,
so tests and alternative backends can stand in for the HTTP clients.
"""

from typing import Any, Dict, List, Optional, Protocol, Union, runtime_checkable

from .llm.base import LLMResponse
from .tools.models import ToolDefinition


@runtime_checkable
class LLMClientProtocol(Protocol):
    """
    Abstract interface for LLM clients

    Example:
        class ScriptedClient:
            async def chat(self, message):
                return "hello"

            async def chat_with_tools(self, message, tools=None):
                return LLMResponse(content="done")
    """

    async def chat(self, message: str) -> str:
        """Single-turn text chat"""
        ...

    async def chat_with_tools(
        self,
        message: str,
        tools: Optional[List[Union[ToolDefinition, Dict[str, Any]]]] = None,
    ) -> LLMResponse:
        """Single-turn chat with a tool catalog"""
        ...
