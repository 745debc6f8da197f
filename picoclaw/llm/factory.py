"""
LLM client factory - maps a configured provider name to its adapter
"""

import logging
import os
from typing import Dict, List, Optional, Type

from ..errors import ProviderUnsupportedError
from .anthropic_client import AnthropicClient
from .base import BaseLLMClient, LLMConfig
from .ollama_client import OllamaClient
from .openai_client import OpenAIClient, OpenRouterClient

logger = logging.getLogger(__name__)


PROVIDERS: Dict[str, Type[BaseLLMClient]] = {
    "openai": OpenAIClient,
    "openrouter": OpenRouterClient,
    "anthropic": AnthropicClient,
    "ollama": OllamaClient,
}


def supported_providers() -> List[str]:
    return sorted(PROVIDERS)


def create_client(
    provider: str,
    model: str,
    api_key: Optional[str] = None,
    api_base: Optional[str] = None,
    **kwargs
) -> BaseLLMClient:
    """
    Create the LLM client for a provider.

    Args:
        provider: Provider name (openai, openrouter, anthropic, ollama)
        model: Model identifier
        api_key: API key
        api_base: Base URL; the provider default is used when omitted
        **kwargs: Extra LLMConfig fields (temperature, max_tokens, timeout, ...)
            plus ``http_client`` / ``audit`` passed to the client

    Raises:
        ProviderUnsupportedError: Unknown provider name
    """
    client_cls = PROVIDERS.get((provider or "").lower())
    if client_cls is None:
        raise ProviderUnsupportedError(provider)

    if api_key is None and client_cls.API_KEY_ENV:
        api_key = os.environ.get(client_cls.API_KEY_ENV)

    http_client = kwargs.pop("http_client", None)
    audit = kwargs.pop("audit", None)

    config = LLMConfig(model=model, api_key=api_key, base_url=api_base, **kwargs)
    client = client_cls(config=config, http_client=http_client, audit=audit)
    logger.info(f"Created LLM client: {client.provider}/{model}")
    return client
