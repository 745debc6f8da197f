"""Agent loop result dataclasses.

Structured types for tracking tool calls and the outcome of one agent turn.
"""

from dataclasses import dataclass, field
from typing import List

STOP_COMPLETED = "completed"
STOP_MAX_ITERATIONS = "max_iterations"


@dataclass
class ToolCallRecord:
    """Per-call telemetry for a single tool invocation."""

    id: str
    """Call id assigned by the provider."""
    name: str
    """Tool name."""
    duration_ms: int = 0
    """Wall-clock execution time in milliseconds."""
    success: bool = True
    """Whether the tool returned a non-error result."""
    result_chars: int = 0
    """Size of ``for_llm`` in characters."""


@dataclass
class AgentRunResult:
    """Structured result of one agent turn."""

    response: str
    """Final answer, empty when the iteration limit was hit."""
    iterations: int = 0
    """Provider round trips performed."""
    stop_reason: str = STOP_COMPLETED
    tool_calls: List[ToolCallRecord] = field(default_factory=list)
    """Ordered list of every tool call made during the turn."""
    duration_ms: int = 0
