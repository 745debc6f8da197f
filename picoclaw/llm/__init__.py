"""
PicoClaw LLM Clients - One interface over several provider wire protocols

Adapters:
- OpenAIClient (OpenAI Chat Completions)
- OpenRouterClient (OpenAI-compatible, OpenRouter)
- AnthropicClient (Anthropic Messages)
- OllamaClient (local models)

Usage:
    from picoclaw.llm import create_client

    client = create_client("openrouter", "anthropic/claude-3.5-sonnet", api_key="sk-or-xxx")
    response = await client.chat_with_tools("Hi", registry.list_definitions())
"""

from .base import BaseLLMClient, LLMConfig, LLMResponse, StopReason, Usage
from .openai_client import OpenAIClient, OpenRouterClient
from .anthropic_client import AnthropicClient
from .ollama_client import OllamaClient
from .factory import PROVIDERS, create_client, supported_providers

__all__ = [
    "BaseLLMClient",
    "LLMConfig",
    "LLMResponse",
    "StopReason",
    "Usage",
    "OpenAIClient",
    "OpenRouterClient",
    "AnthropicClient",
    "OllamaClient",
    "PROVIDERS",
    "create_client",
    "supported_providers",
]
