"""
PicoClaw Tool Base - Abstract interface every tool implements
"""

from abc import ABC, abstractmethod
from typing import Any, Dict

from .models import ToolDefinition, ToolResult


class BaseTool(ABC):
    """
    Base class for tools the agent can call.

    Subclasses set ``name``, ``description`` and ``parameters`` and implement
    ``execute``. Tools report failures by returning ``ToolResult.error(...)``
    or by raising ``ToolExecutionError``; anything else they raise is caught
    by the registry.

    Example:
        class EchoTool(BaseTool):
            name = "echo"
            description = "Echo the given text"
            parameters = {
                "type": "object",
                "properties": {"text": {"type": "string"}},
                "required": ["text"],
            }

            async def execute(self, args):
                return ToolResult.success(args["text"])
    """

    name: str = ""
    description: str = ""
    parameters: Dict[str, Any] = {"type": "object", "properties": {}}

    @abstractmethod
    async def execute(self, args: Dict[str, Any]) -> ToolResult:
        """Run the tool with decoded arguments"""

    def to_definition(self) -> ToolDefinition:
        return ToolDefinition(
            name=self.name,
            description=self.description,
            parameters=dict(self.parameters),
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r}>"
