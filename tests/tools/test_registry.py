"""Tests for picoclaw.tools.registry - registration, lookup and execution"""

import asyncio
import logging

import pytest

from picoclaw.errors import ToolExecutionError, ToolNotFoundError
from picoclaw.tools import BaseTool, ToolDefinition, ToolRegistry, ToolResult


# ── Helper tools ──


class EchoTool(BaseTool):
    name = "echo"
    description = "Echo the text back"
    parameters = {
        "type": "object",
        "properties": {"text": {"type": "string"}},
        "required": ["text"],
    }

    def __init__(self, description=None):
        if description:
            self.description = description
        self.calls = []

    async def execute(self, args):
        self.calls.append(args)
        return ToolResult.success(args.get("text", ""))


class ExplodingTool(BaseTool):
    name = "explode"
    description = "Always raises"

    async def execute(self, args):
        raise RuntimeError("boom")


class ReportingTool(BaseTool):
    name = "report"
    description = "Raises a ToolExecutionError"

    async def execute(self, args):
        raise ToolExecutionError("disk full")


class WrongReturnTool(BaseTool):
    name = "wrong"
    description = "Returns a plain string"

    async def execute(self, args):
        return "not a ToolResult"


class NoTextTool(BaseTool):
    name = "no_text"
    description = "Returns a ToolResult with no LLM text"

    async def execute(self, args):
        return ToolResult(for_llm=None)


class NamedTool(BaseTool):
    description = "Generic"

    def __init__(self, name):
        self.name = name

    async def execute(self, args):
        return ToolResult.success(self.name)


@pytest.fixture
def registry():
    return ToolRegistry()


# =========================================================================
# register / lookup
# =========================================================================


class TestRegister:

    def test_register_and_get(self, registry):
        tool = EchoTool()
        registry.register(tool)

        assert registry.get("echo") is tool
        assert registry.has_tool("echo")
        assert "echo" in registry
        assert registry.count() == 1
        assert len(registry) == 1

    def test_get_unknown_returns_none(self, registry):
        assert registry.get("missing") is None

    def test_require_unknown_raises(self, registry):
        with pytest.raises(ToolNotFoundError) as exc_info:
            registry.require("missing")
        assert str(exc_info.value) == "Tool 'missing' not found"

    def test_last_registration_wins(self, registry):
        registry.register(EchoTool(description="first"))
        registry.register(EchoTool(description="second"))

        definitions = registry.list_definitions()
        assert len(definitions) == 1
        assert definitions[0].description == "second"

    def test_overwrite_logs_warning(self, registry, caplog):
        registry.register(EchoTool())
        with caplog.at_level(logging.WARNING, logger="picoclaw.tools.registry"):
            registry.register(EchoTool())
        assert "already registered" in caplog.text

    def test_register_without_name_rejected(self, registry):
        with pytest.raises(ValueError):
            registry.register(NamedTool(""))

    def test_unregister(self, registry):
        registry.register(EchoTool())
        assert registry.unregister("echo") is True
        assert registry.unregister("echo") is False
        assert registry.count() == 0


# =========================================================================
# list_definitions / list_names
# =========================================================================


class TestDefinitions:

    def test_one_definition_per_name_sorted(self, registry):
        for name in ["zeta", "alpha", "mid", "alpha"]:
            registry.register(NamedTool(name))

        definitions = registry.list_definitions()
        assert [d.name for d in definitions] == ["alpha", "mid", "zeta"]
        assert registry.list_names() == ["alpha", "mid", "zeta"]

    def test_definition_shape(self, registry):
        registry.register(EchoTool())
        definition = registry.list_definitions()[0]

        assert isinstance(definition, ToolDefinition)
        assert definition.parameters["required"] == ["text"]
        assert definition.to_openai_schema()["function"]["name"] == "echo"
        assert definition.to_anthropic_schema()["input_schema"]["type"] == "object"

    def test_empty_registry(self, registry):
        assert registry.list_definitions() == []
        assert registry.list_names() == []


# =========================================================================
# execute
# =========================================================================


class TestExecute:

    @pytest.mark.asyncio
    async def test_execute_success(self, registry):
        tool = EchoTool()
        registry.register(tool)

        result = await registry.execute("echo", {"text": "hi"})

        assert result.is_error is False
        assert result.for_llm == "hi"
        assert tool.calls == [{"text": "hi"}]

    @pytest.mark.asyncio
    async def test_missing_tool_on_empty_registry(self, registry):
        result = await registry.execute("missing_tool", {})

        assert result.is_error is True
        assert result.for_llm == "Tool 'missing_tool' not found"

    @pytest.mark.asyncio
    async def test_missing_tool_with_other_tools(self, registry):
        registry.register(EchoTool())
        result = await registry.execute("missing_tool", {})
        assert result.is_error is True

    @pytest.mark.asyncio
    async def test_exception_is_absorbed(self, registry):
        registry.register(ExplodingTool())

        result = await registry.execute("explode", {})

        assert result.is_error is True
        assert "boom" in result.for_llm
        assert result.for_llm.startswith("Error executing explode")

    @pytest.mark.asyncio
    async def test_tool_execution_error_message(self, registry):
        registry.register(ReportingTool())

        result = await registry.execute("report", {})

        assert result.is_error is True
        assert result.for_llm == "disk full"

    @pytest.mark.asyncio
    async def test_non_tool_result_is_error(self, registry):
        registry.register(WrongReturnTool())

        result = await registry.execute("wrong", {})

        assert result.is_error is True
        assert "expected ToolResult" in result.for_llm

    @pytest.mark.asyncio
    async def test_result_without_text_is_error(self, registry):
        registry.register(NoTextTool())

        result = await registry.execute("no_text", {})

        assert result.is_error is True
        assert "expected str" in result.for_llm

    @pytest.mark.asyncio
    async def test_arguments_are_copied(self, registry):
        tool = EchoTool()
        registry.register(tool)
        args = {"text": "hi"}

        await registry.execute("echo", args)

        assert tool.calls[0] == args
        assert tool.calls[0] is not args

    @pytest.mark.asyncio
    async def test_audit_event_emitted(self, registry, caplog):
        registry.register(EchoTool())
        with caplog.at_level(logging.INFO, logger="picoclaw.audit"):
            await registry.execute("echo", {"text": "abc"})

        audit_lines = [r.getMessage() for r in caplog.records if r.name == "picoclaw.audit"]
        assert len(audit_lines) == 1
        assert '"event_type": "tool_execution"' in audit_lines[0]
        assert '"output_chars": 3' in audit_lines[0]

    @pytest.mark.asyncio
    async def test_concurrent_register_and_execute(self, registry):
        registry.register(EchoTool())

        async def register_many():
            for i in range(50):
                registry.register(NamedTool(f"tool_{i}"))
                await asyncio.sleep(0)

        async def execute_many():
            results = []
            for _ in range(50):
                results.append(await registry.execute("echo", {"text": "x"}))
                registry.list_definitions()
                await asyncio.sleep(0)
            return results

        _, results = await asyncio.gather(register_many(), execute_many())

        assert all(not r.is_error for r in results)
        assert registry.count() == 51
