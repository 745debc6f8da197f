"""
PicoClaw OpenAI Client - OpenAI Chat Completions wire protocol

Supports:
- OpenAI (GPT-4o, GPT-4o mini, ...)
- OpenRouter, which speaks the same protocol with extra attribution headers
- Any other OpenAI-compatible endpoint via base_url

Tool calls arrive as ``choices[0].message.tool_calls[]`` with JSON-encoded
``function.arguments`` strings.
"""

from typing import Any, Dict, List, Optional

from .base import BaseLLMClient, LLMResponse, StopReason, Usage


class OpenAIClient(BaseLLMClient):
    """
    OpenAI API client.

    Example:
        client = OpenAIClient(model="gpt-4o-mini", api_key="sk-xxx")
        response = await client.chat_with_tools(
            "What's in a.txt?", registry.list_definitions()
        )
    """

    provider = "openai"
    DEFAULT_BASE_URL = "https://api.openai.com/v1"
    API_KEY_ENV = "OPENAI_API_KEY"

    def _endpoint(self) -> str:
        return f"{self.base_url}/chat/completions"

    def _headers(self) -> Dict[str, str]:
        headers = super()._headers()
        if self.config.api_key:
            headers["Authorization"] = f"Bearer {self.config.api_key}"
        return headers

    def _build_payload(
        self,
        message: str,
        tools: Optional[List[Dict[str, Any]]] = None,
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": self.config.model,
            "messages": [{"role": "user", "content": message}],
            "temperature": self.config.temperature,
            "max_tokens": self.config.max_tokens,
        }
        if tools:
            payload["tools"] = tools
        return payload

    def _message(self, data: Any) -> Dict[str, Any]:
        """Return ``choices[0].message`` or raise if the envelope is unusable"""
        if not isinstance(data, dict):
            raise self._malformed("Response body is not an object")
        choices = data.get("choices")
        if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
            raise self._malformed("No choices in response")
        message = choices[0].get("message")
        if not isinstance(message, dict):
            raise self._malformed("No message in response")
        return message

    def _extract_text(self, data: Any) -> Optional[str]:
        content = self._message(data).get("content")
        return content if isinstance(content, str) else None

    def _parse_response(self, data: Any) -> LLMResponse:
        message = self._message(data)
        if "content" not in message and "tool_calls" not in message:
            raise self._malformed("No content or tool calls in response")

        content = message.get("content")
        if not isinstance(content, str):
            content = ""

        tool_calls = []
        for raw in message.get("tool_calls") or []:
            if not isinstance(raw, dict):
                continue
            func = raw.get("function")
            if not isinstance(func, dict):
                func = {}
            call = self._build_tool_call(raw.get("id"), func.get("name"), func.get("arguments"))
            if call:
                tool_calls.append(call)

        finish_reason = data["choices"][0].get("finish_reason")
        if tool_calls:
            stop_reason = StopReason.TOOL_USE
        elif finish_reason == "length":
            stop_reason = StopReason.MAX_TOKENS
        else:
            stop_reason = StopReason.END_TURN

        usage = None
        raw_usage = data.get("usage")
        if isinstance(raw_usage, dict):
            usage = Usage(
                prompt_tokens=raw_usage.get("prompt_tokens", 0),
                completion_tokens=raw_usage.get("completion_tokens", 0),
                total_tokens=raw_usage.get("total_tokens", 0),
            )

        return LLMResponse(
            content=content,
            tool_calls=tool_calls,
            stop_reason=stop_reason,
            usage=usage,
            model=data.get("model", self.config.model),
            raw_response=data,
        )


class OpenRouterClient(OpenAIClient):
    """
    OpenRouter client (OpenAI-compatible).

    ``config.extra`` may carry ``app_url`` and ``app_name`` for OpenRouter's
    attribution headers.
    """

    provider = "openrouter"
    DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"
    API_KEY_ENV = "OPENROUTER_API_KEY"

    def _headers(self) -> Dict[str, str]:
        headers = super()._headers()
        headers["X-Title"] = self.config.extra.get("app_name", "PicoClaw")
        app_url = self.config.extra.get("app_url")
        if app_url:
            headers["HTTP-Referer"] = app_url
        return headers
