"""
PicoClaw Anthropic Client - Anthropic Messages wire protocol

Replies are a list of typed content blocks: ``text`` blocks carry prose and
``tool_use`` blocks carry a tool call with a native ``input`` object.
"""

from typing import Any, Dict, List, Optional, Union

from ..tools.models import ToolDefinition
from .base import BaseLLMClient, LLMResponse, StopReason, Usage

ANTHROPIC_VERSION = "2023-06-01"


class AnthropicClient(BaseLLMClient):
    """
    Anthropic API client.

    Example:
        client = AnthropicClient(model="claude-3-5-sonnet-20241022", api_key="sk-ant-xxx")
        text = await client.chat("Hello!")
    """

    provider = "anthropic"
    DEFAULT_BASE_URL = "https://api.anthropic.com/v1"
    API_KEY_ENV = "ANTHROPIC_API_KEY"

    def _endpoint(self) -> str:
        return f"{self.base_url}/messages"

    def _headers(self) -> Dict[str, str]:
        headers = super()._headers()
        headers["x-api-key"] = self.config.api_key or ""
        headers["anthropic-version"] = self.config.extra.get("anthropic_version", ANTHROPIC_VERSION)
        return headers

    def _format_tool(self, tool: Union[ToolDefinition, Dict[str, Any]]) -> Dict[str, Any]:
        """Format tool to Anthropic format"""
        if isinstance(tool, ToolDefinition):
            return tool.to_anthropic_schema()
        if "function" in tool:
            # OpenAI format - convert
            func = tool["function"]
            return {
                "name": func["name"],
                "description": func.get("description", ""),
                "input_schema": func.get("parameters", {"type": "object", "properties": {}}),
            }
        return tool

    def _build_payload(
        self,
        message: str,
        tools: Optional[List[Dict[str, Any]]] = None,
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": self.config.model,
            "max_tokens": self.config.max_tokens,
            "temperature": self.config.temperature,
            "messages": [{"role": "user", "content": message}],
        }
        if tools:
            payload["tools"] = tools
            payload["tool_choice"] = {"type": "auto"}
        return payload

    def _blocks(self, data: Any) -> List[Any]:
        if not isinstance(data, dict):
            raise self._malformed("Response body is not an object")
        blocks = data.get("content")
        if not isinstance(blocks, list):
            raise self._malformed("No content blocks in response")
        return blocks

    def _extract_text(self, data: Any) -> Optional[str]:
        texts = [
            block.get("text")
            for block in self._blocks(data)
            if isinstance(block, dict) and block.get("type") == "text"
        ]
        texts = [t for t in texts if isinstance(t, str)]
        return "".join(texts) if texts else None

    def _parse_response(self, data: Any) -> LLMResponse:
        content = ""
        tool_calls = []

        for block in self._blocks(data):
            if not isinstance(block, dict):
                continue
            block_type = block.get("type")
            if block_type == "text":
                text = block.get("text")
                if isinstance(text, str):
                    content += text
            elif block_type == "tool_use":
                call = self._build_tool_call(block.get("id"), block.get("name"), block.get("input"))
                if call:
                    tool_calls.append(call)

        raw_stop = data.get("stop_reason")
        if tool_calls:
            stop_reason = StopReason.TOOL_USE
        elif raw_stop == "max_tokens":
            stop_reason = StopReason.MAX_TOKENS
        else:
            stop_reason = StopReason.END_TURN

        usage = None
        raw_usage = data.get("usage")
        if isinstance(raw_usage, dict):
            prompt = raw_usage.get("input_tokens", 0)
            completion = raw_usage.get("output_tokens", 0)
            usage = Usage(
                prompt_tokens=prompt,
                completion_tokens=completion,
                total_tokens=prompt + completion,
            )

        return LLMResponse(
            content=content,
            tool_calls=tool_calls,
            stop_reason=stop_reason,
            usage=usage,
            model=data.get("model", self.config.model),
            raw_response=data,
        )
