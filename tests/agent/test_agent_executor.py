"""
Tests for picoclaw.agent.executor - the tool-calling loop

The provider is a scripted AsyncMock: each chat_with_tools call returns
the next LLMResponse in the script.
"""

import logging
from unittest.mock import AsyncMock, MagicMock

import pytest

from picoclaw.agent import AgentExecutor
from picoclaw.agent.models import STOP_COMPLETED, STOP_MAX_ITERATIONS
from picoclaw.errors import ProviderHTTPError
from picoclaw.llm import LLMResponse
from picoclaw.protocols import LLMClientProtocol
from picoclaw.tools import BaseTool, ToolCall, ToolRegistry, ToolResult, WriteFileTool


# =========================================================================
# Helpers
# =========================================================================


def final(content):
    return LLMResponse(content=content)


def calls(*tool_calls):
    return LLMResponse(
        content="",
        tool_calls=[
            ToolCall(id=f"call_{i}", name=name, arguments=args)
            for i, (name, args) in enumerate(tool_calls)
        ],
    )


def scripted_client(*responses):
    client = MagicMock()
    client.chat_with_tools = AsyncMock(side_effect=list(responses))
    client.chat = AsyncMock(return_value="")
    return client


class RecordingTool(BaseTool):
    description = "Records calls"

    def __init__(self, name, log, result=None):
        self.name = name
        self.log = log
        self.result = result or ToolResult.success(f"{name} ok")

    async def execute(self, args):
        self.log.append((self.name, args))
        return self.result


class FailingTool(BaseTool):
    name = "fails"
    description = "Always raises"

    async def execute(self, args):
        raise RuntimeError("kaboom")


@pytest.fixture
def registry():
    return ToolRegistry()


# =========================================================================
# Construction
# =========================================================================


class TestConstruction:

    def test_requires_client(self, registry):
        with pytest.raises(ValueError):
            AgentExecutor(llm_client=None, tool_registry=registry)

    def test_rejects_zero_iterations(self, registry):
        with pytest.raises(ValueError):
            AgentExecutor(llm_client=scripted_client(), tool_registry=registry, max_iterations=0)

    def test_defaults(self, registry):
        executor = AgentExecutor(llm_client=scripted_client(), tool_registry=registry)
        assert executor.max_iterations == 10

    def test_mock_satisfies_protocol(self):
        assert isinstance(scripted_client(), LLMClientProtocol)


# =========================================================================
# Loop behaviour
# =========================================================================


class TestLoop:

    @pytest.mark.asyncio
    async def test_direct_answer_single_iteration(self, registry):
        client = scripted_client(final("Hello!"))
        executor = AgentExecutor(llm_client=client, tool_registry=registry)

        result = await executor.run("hi")

        assert result.response == "Hello!"
        assert result.iterations == 1
        assert result.stop_reason == STOP_COMPLETED
        assert result.tool_calls == []
        assert client.chat_with_tools.await_count == 1

    @pytest.mark.asyncio
    async def test_execute_returns_text(self, registry):
        executor = AgentExecutor(llm_client=scripted_client(final("Hello!")), tool_registry=registry)
        assert await executor.execute("hi") == "Hello!"

    @pytest.mark.asyncio
    async def test_tool_calls_run_in_order(self, registry):
        log = []
        for name in ["a", "b", "c"]:
            registry.register(RecordingTool(name, log))
        client = scripted_client(
            calls(("c", {"n": 1}), ("a", {"n": 2}), ("b", {"n": 3})),
            final("done"),
        )
        executor = AgentExecutor(llm_client=client, tool_registry=registry)

        result = await executor.run("go")

        assert log == [("c", {"n": 1}), ("a", {"n": 2}), ("b", {"n": 3})]
        assert [r.name for r in result.tool_calls] == ["c", "a", "b"]
        assert [r.id for r in result.tool_calls] == ["call_0", "call_1", "call_2"]
        assert result.iterations == 2
        assert result.response == "done"

    @pytest.mark.asyncio
    async def test_same_message_and_catalog_each_iteration(self, registry):
        registry.register(RecordingTool("a", []))
        client = scripted_client(calls(("a", {})), calls(("a", {})), final("done"))
        executor = AgentExecutor(llm_client=client, tool_registry=registry)

        await executor.run("the message")

        assert client.chat_with_tools.await_count == 3
        for call in client.chat_with_tools.await_args_list:
            message, definitions = call.args
            assert message == "the message"
            assert [d.name for d in definitions] == ["a"]

    @pytest.mark.asyncio
    async def test_max_iterations_bound(self, registry):
        registry.register(RecordingTool("loop", []))
        client = scripted_client(*[calls(("loop", {})) for _ in range(20)])
        executor = AgentExecutor(llm_client=client, tool_registry=registry, max_iterations=10)

        result = await executor.run("never ends")

        assert client.chat_with_tools.await_count == 10
        assert result.iterations == 10
        assert result.stop_reason == STOP_MAX_ITERATIONS
        assert result.response == ""
        assert len(result.tool_calls) == 10

    @pytest.mark.asyncio
    async def test_max_iterations_logs_warning(self, registry, caplog):
        client = scripted_client(calls(("x", {})), calls(("x", {})))
        executor = AgentExecutor(llm_client=client, tool_registry=registry, max_iterations=2)

        with caplog.at_level(logging.WARNING, logger="picoclaw.agent.executor"):
            await executor.execute("hi")

        assert "Max iterations reached" in caplog.text

    @pytest.mark.asyncio
    async def test_unknown_tool_does_not_stop_loop(self, registry):
        client = scripted_client(calls(("missing", {})), final("recovered"))
        executor = AgentExecutor(llm_client=client, tool_registry=registry)

        result = await executor.run("hi")

        assert result.response == "recovered"
        assert result.tool_calls[0].success is False

    @pytest.mark.asyncio
    async def test_failing_tool_does_not_stop_loop(self, registry):
        registry.register(FailingTool())
        log = []
        registry.register(RecordingTool("after", log))
        client = scripted_client(calls(("fails", {}), ("after", {})), final("ok"))
        executor = AgentExecutor(llm_client=client, tool_registry=registry)

        result = await executor.run("hi")

        assert [r.success for r in result.tool_calls] == [False, True]
        assert log == [("after", {})]
        assert result.response == "ok"

    @pytest.mark.asyncio
    async def test_provider_error_propagates(self, registry):
        client = MagicMock()
        client.chat_with_tools = AsyncMock(side_effect=ProviderHTTPError(500, "boom"))
        executor = AgentExecutor(llm_client=client, tool_registry=registry)

        with pytest.raises(ProviderHTTPError):
            await executor.execute("hi")


# =========================================================================
# User-facing output
# =========================================================================


class TestUserOutput:

    @pytest.mark.asyncio
    async def test_failing_output_does_not_stop_loop(self, registry, caplog):
        result = ToolResult.success("ok").with_user_content("to a closed pipe")
        registry.register(RecordingTool("show", [], result=result))

        def broken_sink(text):
            raise BrokenPipeError("stdout closed")

        executor = AgentExecutor(
            llm_client=scripted_client(calls(("show", {})), final("done")),
            tool_registry=registry,
            user_output=broken_sink,
        )

        with caplog.at_level(logging.ERROR, logger="picoclaw.agent.executor"):
            answer = await executor.execute("hi")

        assert answer == "done"
        assert "Failed to deliver tool output" in caplog.text

    @pytest.mark.asyncio
    async def test_failing_async_output_does_not_stop_loop(self, registry):
        result = ToolResult.success("ok").with_user_content("async text")
        registry.register(RecordingTool("show", [], result=result))
        sink = AsyncMock(side_effect=ConnectionResetError("transport gone"))
        executor = AgentExecutor(
            llm_client=scripted_client(calls(("show", {})), final("done")),
            tool_registry=registry,
            user_output=sink,
        )

        assert await executor.execute("hi") == "done"
        sink.assert_awaited_once_with("async text")

    @pytest.mark.asyncio
    async def test_for_user_delivered(self, registry):
        result = ToolResult.success("ok").with_user_content("Look at this")
        registry.register(RecordingTool("show", [], result=result))
        delivered = []
        executor = AgentExecutor(
            llm_client=scripted_client(calls(("show", {})), final("done")),
            tool_registry=registry,
            user_output=delivered.append,
        )

        await executor.execute("hi")

        assert delivered == ["Look at this"]

    @pytest.mark.asyncio
    async def test_silent_result_not_delivered(self, registry):
        result = ToolResult.success("ok").with_user_content("hidden").as_silent()
        registry.register(RecordingTool("quiet", [], result=result))
        delivered = []
        executor = AgentExecutor(
            llm_client=scripted_client(calls(("quiet", {})), final("done")),
            tool_registry=registry,
            user_output=delivered.append,
        )

        await executor.execute("hi")

        assert delivered == []

    @pytest.mark.asyncio
    async def test_async_output_callable(self, registry):
        result = ToolResult.success("ok").with_user_content("async text")
        registry.register(RecordingTool("show", [], result=result))
        sink = AsyncMock()
        executor = AgentExecutor(
            llm_client=scripted_client(calls(("show", {})), final("done")),
            tool_registry=registry,
            user_output=sink,
        )

        await executor.execute("hi")

        sink.assert_awaited_once_with("async text")


# =========================================================================
# End to end with WriteFileTool
# =========================================================================


class TestWriteFileScenario:

    @pytest.mark.asyncio
    async def test_write_then_answer(self, registry, tmp_path):
        registry.register(WriteFileTool(workspace=tmp_path))
        delivered = []
        client = scripted_client(
            calls(("write_file", {"path": "a.txt", "content": "hi"})),
            final("done"),
        )
        executor = AgentExecutor(
            llm_client=client,
            tool_registry=registry,
            user_output=delivered.append,
        )

        answer = await executor.execute("Create a.txt containing hi")

        assert answer == "done"
        assert (tmp_path / "a.txt").read_text(encoding="utf-8") == "hi"
        assert delivered == ["✓ Created file: a.txt"]
        assert client.chat_with_tools.await_count == 2
