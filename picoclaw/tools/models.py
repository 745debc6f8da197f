"""
PicoClaw Tool Models - Data structures for LLM tool calling
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class ToolDefinition:
    """
    Public schema of a registered tool, sent to the LLM provider.

    Attributes:
        name: Unique tool identifier (e.g., "write_file")
        description: What the tool does (shown to LLM)
        parameters: JSON Schema for parameters

    Example:
        definition = ToolDefinition(
            name="write_file",
            description="Write content to a file in the workspace",
            parameters={
                "type": "object",
                "properties": {
                    "path": {"type": "string", "description": "File path"}
                },
                "required": ["path"]
            },
        )
    """
    name: str
    description: str
    parameters: Dict[str, Any] = field(default_factory=dict)

    def to_openai_schema(self) -> Dict[str, Any]:
        """Convert to OpenAI function calling format"""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            }
        }

    def to_anthropic_schema(self) -> Dict[str, Any]:
        """Convert to Anthropic tool format"""
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": self.parameters or {"type": "object", "properties": {}},
        }


@dataclass
class ToolCall:
    """
    Represents a tool call from LLM response

    Attributes:
        id: Unique call ID from LLM (carried, not correlated by the loop)
        name: Tool name
        arguments: Parsed arguments dict
    """
    id: str
    name: str
    arguments: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "arguments": self.arguments,
        }


@dataclass(frozen=True)
class ToolResult:
    """
    Result of a tool execution

    Attributes:
        for_llm: What the tool learned or did, fed back to the model
        for_user: Text to show the human immediately (optional)
        is_error: Whether execution failed
        silent: Suppress the user-facing notification
        is_async: The tool continues work in the background
    """
    for_llm: str
    for_user: Optional[str] = None
    is_error: bool = False
    silent: bool = False
    is_async: bool = False

    @classmethod
    def success(cls, for_llm: str) -> "ToolResult":
        return cls(for_llm=for_llm)

    @classmethod
    def error(cls, message: str) -> "ToolResult":
        return cls(for_llm=message, is_error=True)

    def with_user_content(self, content: str) -> "ToolResult":
        return replace(self, for_user=content)

    def as_silent(self) -> "ToolResult":
        return replace(self, silent=True)

    def as_async(self) -> "ToolResult":
        return replace(self, is_async=True)

    @property
    def user_visible(self) -> bool:
        """True if there is user-facing text that should be delivered"""
        return bool(self.for_user) and not self.silent
