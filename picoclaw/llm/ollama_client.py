"""
PicoClaw Ollama Client - Ollama chat API for local models

Supports:
- Any model available in Ollama (Llama 3, Mistral, Qwen, ...)
- Local and remote Ollama servers

Ollama declares tools in OpenAI format but returns ``function.arguments`` as
a native object and does not assign call ids, so ids are synthesized from
the call position.
"""

from typing import Any, Dict, List, Optional

from .base import BaseLLMClient, LLMResponse, StopReason, Usage


class OllamaClient(BaseLLMClient):
    """
    Ollama API client for local LLM inference.

    Example:
        # Local Ollama
        client = OllamaClient(model="llama3.1")

        # Remote Ollama server
        client = OllamaClient(model="qwen2.5", base_url="http://remote-server:11434")
    """

    provider = "ollama"
    DEFAULT_BASE_URL = "http://localhost:11434"

    def _endpoint(self) -> str:
        return f"{self.base_url}/api/chat"

    def _build_payload(
        self,
        message: str,
        tools: Optional[List[Dict[str, Any]]] = None,
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": self.config.model,
            "messages": [{"role": "user", "content": message}],
            "stream": False,
            "options": {
                "temperature": self.config.temperature,
                "num_predict": self.config.max_tokens,
            },
        }
        # Ollama supports OpenAI-compatible tools
        if tools:
            payload["tools"] = tools
        return payload

    def _message(self, data: Any) -> Dict[str, Any]:
        if not isinstance(data, dict) or not isinstance(data.get("message"), dict):
            raise self._malformed("No message in response")
        return data["message"]

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
        for index, raw in enumerate(message.get("tool_calls") or []):
            if not isinstance(raw, dict):
                continue
            func = raw.get("function")
            if not isinstance(func, dict):
                func = {}
            call = self._build_tool_call(
                raw.get("id") or f"call_{index}",
                func.get("name"),
                func.get("arguments"),
            )
            if call:
                tool_calls.append(call)

        if tool_calls:
            stop_reason = StopReason.TOOL_USE
        elif data.get("done_reason") == "length":
            stop_reason = StopReason.MAX_TOKENS
        else:
            stop_reason = StopReason.END_TURN

        # Ollama provides eval metrics instead of a usage object
        usage = None
        if "prompt_eval_count" in data or "eval_count" in data:
            prompt = data.get("prompt_eval_count", 0)
            completion = data.get("eval_count", 0)
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
