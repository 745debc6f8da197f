"""
PicoClaw Agent - The tool-calling execution loop
"""

from .executor import DEFAULT_MAX_ITERATIONS, AgentExecutor
from .models import STOP_COMPLETED, STOP_MAX_ITERATIONS, AgentRunResult, ToolCallRecord

__all__ = [
    "AgentExecutor",
    "AgentRunResult",
    "ToolCallRecord",
    "DEFAULT_MAX_ITERATIONS",
    "STOP_COMPLETED",
    "STOP_MAX_ITERATIONS",
]
