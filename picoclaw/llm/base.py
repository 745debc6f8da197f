"""
PicoClaw LLM Client Base - Base class and common types for LLM clients

This module provides:
- BaseLLMClient: Abstract base class for all provider adapters
- LLMConfig: Configuration dataclass
- LLMResponse: Standardized response format

Every adapter speaks one vendor wire protocol over httpx and normalizes the
reply into an LLMResponse, so the agent loop never looks at raw envelopes.
"""

import json
import logging
import os
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

import httpx

from ..audit import AuditLogger
from ..errors import (
    ProviderError,
    ProviderHTTPError,
    ProviderMalformedResponseError,
    ProviderRequestError,
)
from ..tools.models import ToolCall, ToolDefinition

logger = logging.getLogger(__name__)


class StopReason(str, Enum):
    """Reason why the LLM stopped generating"""
    END_TURN = "end_turn"           # Natural completion
    MAX_TOKENS = "max_tokens"       # Hit token limit
    TOOL_USE = "tool_use"           # Model wants to use a tool


@dataclass
class LLMConfig:
    """
    Configuration for LLM clients.

    Attributes:
        api_key: API key for the provider
        model: Model name (e.g., "gpt-4o", "claude-3-5-sonnet-20241022")
        base_url: Optional base URL override for API
        temperature: Sampling temperature
        max_tokens: Maximum tokens in response
        timeout: Request timeout in seconds
        default_headers: Additional headers to send with requests
        extra: Provider-specific settings
    """
    api_key: Optional[str] = None
    model: str = ""
    base_url: Optional[str] = None
    temperature: float = 0.7
    max_tokens: int = 2048
    timeout: float = 60
    default_headers: Dict[str, str] = field(default_factory=dict)
    extra: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Usage:
    """Token usage information"""
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


@dataclass
class LLMResponse:
    """
    Standardized LLM response format.

    If ``tool_calls`` is empty, ``content`` is the final answer. Otherwise
    ``content`` is optional commentary and the caller should run the tools.
    """
    content: str = ""
    tool_calls: List[ToolCall] = field(default_factory=list)
    stop_reason: StopReason = StopReason.END_TURN
    usage: Optional[Usage] = None
    model: Optional[str] = None

    # Raw response for debugging
    raw_response: Optional[Any] = None

    @property
    def has_tool_calls(self) -> bool:
        return len(self.tool_calls) > 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "content": self.content,
            "tool_calls": [tc.to_dict() for tc in self.tool_calls],
            "stop_reason": self.stop_reason.value,
            "model": self.model,
        }


class BaseLLMClient(ABC):
    """
    Abstract base class for LLM provider adapters.

    Subclasses describe one wire protocol: where to POST, which headers to
    send, how to build the request envelope and how to read the reply.
    The HTTP round trip, error mapping and tool-call decoding live here.

    Implements LLMClientProtocol.

    Example:
        async with OpenAIClient(model="gpt-4o", api_key="sk-xxx") as client:
            text = await client.chat("Hello!")
            response = await client.chat_with_tools(
                "Write hello to a.txt", registry.list_definitions()
            )
    """

    # Provider name (override in subclasses)
    provider: str = "unknown"

    # Used when config.base_url is not set
    DEFAULT_BASE_URL: str = ""

    # Environment variable consulted when no api_key is given
    API_KEY_ENV: Optional[str] = None

    def __init__(
        self,
        config: Optional[LLMConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        audit: Optional[AuditLogger] = None,
        **kwargs
    ):
        """
        Initialize the client.

        Args:
            config: LLMConfig instance
            http_client: Pre-built httpx.AsyncClient (not closed by this client)
            audit: AuditLogger for provider_call events
            **kwargs: Config values when no config is given, overrides otherwise
        """
        if config is None:
            if not kwargs.get("model"):
                raise ValueError("model is required")
            if "api_key" not in kwargs and self.API_KEY_ENV:
                kwargs["api_key"] = os.environ.get(self.API_KEY_ENV)
            config = LLMConfig(**kwargs)
        else:
            for key, value in kwargs.items():
                if hasattr(config, key):
                    setattr(config, key, value)

        self.config = config
        self._client = http_client
        self._owns_client = http_client is None
        self._audit = audit or AuditLogger()

    @property
    def base_url(self) -> str:
        return (self.config.base_url or self.DEFAULT_BASE_URL).rstrip("/")

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client"""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.config.timeout, connect=10.0),
            )
            self._owns_client = True
        return self._client

    # ------------------------------------------------------------------
    # Wire protocol (provider-specific)
    # ------------------------------------------------------------------

    @abstractmethod
    def _endpoint(self) -> str:
        """Full URL of the chat endpoint"""

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        headers.update(self.config.default_headers)
        return headers

    @abstractmethod
    def _build_payload(
        self,
        message: str,
        tools: Optional[List[Dict[str, Any]]] = None,
    ) -> Dict[str, Any]:
        """Build the request envelope for a single-turn user message"""

    @abstractmethod
    def _parse_response(self, data: Any) -> LLMResponse:
        """Normalize a decoded response body into an LLMResponse"""

    @abstractmethod
    def _extract_text(self, data: Any) -> Optional[str]:
        """Text reply for plain chat, or None if the body carries none"""

    def _format_tool(self, tool: Union[ToolDefinition, Dict[str, Any]]) -> Dict[str, Any]:
        """
        Format a tool to the provider-specific schema.

        Default implementation uses OpenAI format. Dicts pass through.
        """
        if isinstance(tool, ToolDefinition):
            return tool.to_openai_schema()
        return tool

    # ------------------------------------------------------------------
    # Shared helpers
    # ------------------------------------------------------------------

    async def _post(self, payload: Dict[str, Any]) -> Any:
        """POST the payload and return the decoded JSON body"""
        client = self._get_client()
        url = self._endpoint()

        try:
            response = await client.post(url, json=payload, headers=self._headers())
        except httpx.HTTPError as e:
            raise ProviderRequestError(f"Request failed: {e}", context=self.provider) from e

        if not response.is_success:
            raise ProviderHTTPError(response.status_code, response.text, provider=self.provider)

        try:
            return response.json()
        except ValueError as e:
            raise ProviderMalformedResponseError(
                f"Failed to parse response: {e}", context=self.provider
            ) from e

    def _malformed(self, message: str) -> ProviderMalformedResponseError:
        return ProviderMalformedResponseError(message, context=self.provider)

    def _build_tool_call(self, call_id: Any, name: Any, arguments: Any) -> Optional[ToolCall]:
        """
        Decode one wire tool call, or return None to drop it.

        Arguments may arrive as a JSON string or as a native object; both
        decode to a dict. Calls missing id, name or arguments are dropped.
        """
        if not call_id or not isinstance(name, str) or not name or arguments is None:
            logger.debug(f"Dropping incomplete tool call: id={call_id!r} name={name!r}")
            return None

        if isinstance(arguments, str):
            if not arguments.strip():
                arguments = {}
            else:
                try:
                    arguments = json.loads(arguments)
                except ValueError:
                    logger.debug(f"Dropping tool call {name!r}: arguments are not valid JSON")
                    return None

        if not isinstance(arguments, dict):
            logger.debug(f"Dropping tool call {name!r}: arguments are not an object")
            return None

        return ToolCall(id=str(call_id), name=name, arguments=arguments)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def chat(self, message: str) -> str:
        """
        Send a single user message and return the text reply.

        Raises:
            ProviderHTTPError: Non-success status
            ProviderMalformedResponseError: No text content in the reply
        """
        data = await self._post(self._build_payload(message))
        text = self._extract_text(data)
        if text is None:
            raise self._malformed("No content in response")
        return text

    async def chat_with_tools(
        self,
        message: str,
        tools: Optional[List[Union[ToolDefinition, Dict[str, Any]]]] = None,
    ) -> LLMResponse:
        """
        Send a single user message together with the tool catalog.

        Args:
            message: Full user input
            tools: ToolDefinitions (or pre-formatted provider dicts)

        Returns:
            LLMResponse with content and zero or more tool calls
        """
        tool_schemas = [self._format_tool(t) for t in tools] if tools else None
        payload = self._build_payload(message, tool_schemas)

        start = time.monotonic()
        try:
            data = await self._post(payload)
            response = self._parse_response(data)
        except ProviderError as e:
            self._audit.log_provider_call(
                provider=self.provider,
                model=self.config.model,
                success=False,
                duration_ms=int((time.monotonic() - start) * 1000),
                error=str(e),
            )
            raise

        self._audit.log_provider_call(
            provider=self.provider,
            model=self.config.model,
            success=True,
            duration_ms=int((time.monotonic() - start) * 1000),
            tool_calls_count=len(response.tool_calls),
        )
        return response

    async def close(self) -> None:
        """Close the HTTP client if this adapter created it"""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} provider={self.provider} model={self.config.model}>"
