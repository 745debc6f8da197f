"""
PicoClaw - A lightweight personal AI-assistant runtime

PicoClaw takes a user message, consults an LLM provider, runs the tools the
provider asks for and returns the final answer.

Key Features:
- One client interface over OpenAI, OpenRouter, Anthropic and Ollama
- Concurrent tool registry with per-call timing and error isolation
- Bounded agent loop with structured audit logging
- Task pool with admission control and graceful shutdown

Quick Start:
    from picoclaw import AgentExecutor, ToolRegistry, WriteFileTool, create_client

    registry = ToolRegistry()
    registry.register(WriteFileTool(workspace="./workspace"))

    client = create_client("openai", "gpt-4o-mini", api_key="sk-xxx")
    executor = AgentExecutor(llm_client=client, tool_registry=registry)
    answer = await executor.execute("Create hello.txt containing 'hi'")
"""

__version__ = "0.1.0"

from .errors import (
    ConfigError,
    ErrorCode,
    PicoClawError,
    ProviderError,
    ProviderHTTPError,
    ProviderMalformedResponseError,
    ProviderRequestError,
    ProviderUnsupportedError,
    RuntimeCapacityError,
    ShutdownTimeoutError,
    ToolExecutionError,
    ToolNotFoundError,
)
from .tools import (
    BaseTool,
    FunctionTool,
    ToolCall,
    ToolDefinition,
    ToolRegistry,
    ToolResult,
    WriteFileTool,
    tool,
)
from .llm import BaseLLMClient, LLMConfig, LLMResponse, create_client
from .protocols import LLMClientProtocol
from .agent import AgentExecutor, AgentRunResult
from .runtime import RuntimeManager, TaskPool
from .config import Config, load_config

__all__ = [
    "__version__",
    # Errors
    "ConfigError",
    "ErrorCode",
    "PicoClawError",
    "ProviderError",
    "ProviderHTTPError",
    "ProviderMalformedResponseError",
    "ProviderRequestError",
    "ProviderUnsupportedError",
    "RuntimeCapacityError",
    "ShutdownTimeoutError",
    "ToolExecutionError",
    "ToolNotFoundError",
    # Tools
    "BaseTool",
    "FunctionTool",
    "ToolCall",
    "ToolDefinition",
    "ToolRegistry",
    "ToolResult",
    "WriteFileTool",
    "tool",
    # LLM
    "BaseLLMClient",
    "LLMClientProtocol",
    "LLMConfig",
    "LLMResponse",
    "create_client",
    # Agent / runtime
    "AgentExecutor",
    "AgentRunResult",
    "RuntimeManager",
    "TaskPool",
    # Config
    "Config",
    "load_config",
]
