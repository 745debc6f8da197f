"""
PicoClaw Agent Executor - The tool-calling loop

Asks the provider, runs any tools it requests through the registry, and
repeats until the provider answers without tool calls or the iteration
limit is reached.

Note:
    Each provider call is a fresh single-turn exchange: the original user
    message and the current tool catalog are sent unchanged on every
    iteration. Tool outputs are logged, not threaded back into context.
"""

import inspect
import logging
import time
from typing import Any, Callable, Optional

from ..audit import AuditLogger
from ..protocols import LLMClientProtocol
from ..tools.registry import ToolRegistry
from .models import STOP_COMPLETED, STOP_MAX_ITERATIONS, AgentRunResult, ToolCallRecord

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 10


class AgentExecutor:
    """
    Runs the agent loop for one user message at a time.

    Usage:
        executor = AgentExecutor(llm_client=client, tool_registry=registry)
        answer = await executor.execute("Create a.txt containing hi")

        # Full telemetry
        result = await executor.run("Create a.txt containing hi")
        print(result.iterations, [c.name for c in result.tool_calls])
    """

    def __init__(
        self,
        llm_client: LLMClientProtocol,
        tool_registry: ToolRegistry,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        user_output: Optional[Callable[[str], Any]] = None,
        audit: Optional[AuditLogger] = None,
    ):
        """
        Initialize AgentExecutor

        Args:
            llm_client: Client implementing LLMClientProtocol (required)
            tool_registry: Registry holding the callable tools
            max_iterations: Upper bound on provider round trips per turn
            user_output: Receives user-facing tool text (sync or async);
                defaults to print
            audit: AuditLogger for agent_iteration events
        """
        if llm_client is None:
            raise ValueError("llm_client is required")
        if max_iterations < 1:
            raise ValueError("max_iterations must be at least 1")

        self.llm_client = llm_client
        self.tool_registry = tool_registry
        self.max_iterations = max_iterations
        self.user_output = user_output or print
        self._audit = audit or AuditLogger()

    async def execute(self, message: str) -> str:
        """Run the loop and return the final answer ("" if the limit was hit)"""
        result = await self.run(message)
        return result.response

    async def run(self, message: str) -> AgentRunResult:
        """
        Run the loop for one message.

        Provider errors propagate immediately; tool failures never stop
        the loop.
        """
        logger.info("Starting agent execution loop")
        start = time.monotonic()
        result = AgentRunResult(response="", stop_reason=STOP_MAX_ITERATIONS)

        for iteration in range(1, self.max_iterations + 1):
            logger.debug(f"Agent iteration: {iteration}/{self.max_iterations}")
            result.iterations = iteration

            definitions = self.tool_registry.list_definitions()
            response = await self.llm_client.chat_with_tools(message, definitions)

            if not response.tool_calls:
                logger.info(f"LLM response without tool calls (iteration: {iteration})")
                self._audit.log_agent_iteration(iteration, [], final_answer=True)
                result.response = response.content
                result.stop_reason = STOP_COMPLETED
                break

            tool_names = [tc.name for tc in response.tool_calls]
            logger.info(f"LLM requested tool calls: {tool_names} (iteration: {iteration})")
            self._audit.log_agent_iteration(iteration, tool_names, final_answer=False)

            for tool_call in response.tool_calls:
                logger.debug(f"Executing tool: {tool_call.name}")
                tool_start = time.monotonic()
                tool_result = await self.tool_registry.execute(tool_call.name, tool_call.arguments)

                result.tool_calls.append(ToolCallRecord(
                    id=tool_call.id,
                    name=tool_call.name,
                    duration_ms=int((time.monotonic() - tool_start) * 1000),
                    success=not tool_result.is_error,
                    result_chars=len(tool_result.for_llm),
                ))

                if tool_result.is_error:
                    logger.error(f"Tool failed: {tool_call.name} - {tool_result.for_llm}")
                else:
                    logger.info(f"Tool succeeded: {tool_call.name}")

                if tool_result.user_visible:
                    await self._deliver(tool_result.for_user)
        else:
            logger.warning(f"Max iterations reached ({self.max_iterations})")

        result.duration_ms = int((time.monotonic() - start) * 1000)
        return result

    async def _deliver(self, text: str) -> None:
        """Send user-facing tool output to the user channel. Failures are logged, not raised."""
        try:
            outcome = self.user_output(text)
            if inspect.isawaitable(outcome):
                await outcome
        except Exception as e:
            logger.error(f"Failed to deliver tool output to user: {e}", exc_info=True)
