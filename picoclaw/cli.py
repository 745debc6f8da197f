"""CLI argument parsing and single-turn agent entry point."""

import argparse
import asyncio
import logging
import os
import signal
import sys
from typing import List, Optional, Set

from . import __version__
from .agent import AgentExecutor
from .config import Config, build_llm_client, build_tool_registry, load_config
from .errors import PicoClawError, ShutdownTimeoutError
from .logging_setup import setup_logging
from .protocols import LLMClientProtocol
from .runtime import TaskPool
from .tools import ToolRegistry

logger = logging.getLogger(__name__)


async def _shutdown_pool(pool: TaskPool, timeout: float) -> None:
    try:
        await pool.shutdown(timeout)
    except ShutdownTimeoutError as e:
        logger.warning(f"{e}")


# Strong references to in-flight shutdown tasks started by signal handlers
_shutdown_tasks: Set["asyncio.Task[None]"] = set()


def _spawn_shutdown(pool: TaskPool, timeout: float) -> None:
    task = asyncio.get_running_loop().create_task(_shutdown_pool(pool, timeout))
    _shutdown_tasks.add(task)
    task.add_done_callback(_shutdown_tasks.discard)


def _install_signal_handlers(pool: TaskPool, timeout: float) -> List[signal.Signals]:
    loop = asyncio.get_running_loop()
    installed = []
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _spawn_shutdown, pool, timeout)
        except (NotImplementedError, RuntimeError, ValueError):
            # Not supported on this platform or outside the main thread
            continue
        installed.append(sig)
    return installed


def _remove_signal_handlers(sigs: List[signal.Signals]) -> None:
    loop = asyncio.get_running_loop()
    for sig in sigs:
        loop.remove_signal_handler(sig)


async def run_agent(
    config: Config,
    message: str,
    llm_client: Optional[LLMClientProtocol] = None,
    tool_registry: Optional[ToolRegistry] = None,
) -> str:
    """
    Run one agent turn inside a TaskPool and shut the pool down afterwards.

    Returns "" if the turn was interrupted by shutdown.
    """
    client = llm_client if llm_client is not None else build_llm_client(config)
    registry = tool_registry if tool_registry is not None else build_tool_registry(config)
    executor = AgentExecutor(
        llm_client=client,
        tool_registry=registry,
        max_iterations=config.agent.max_iterations,
    )
    pool = TaskPool(max_concurrent=config.runtime.max_concurrent_tasks)
    sigs = _install_signal_handlers(pool, config.runtime.shutdown_timeout)

    logger.info(f"Tools available: {registry.list_names()}")
    try:
        handle = pool.spawn(executor.execute(message), default="")
        return await handle
    finally:
        _remove_signal_handlers(sigs)
        await _shutdown_pool(pool, config.runtime.shutdown_timeout)
        if llm_client is None:
            await client.close()


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="picoclaw",
        description="Lightweight personal AI assistant",
    )
    parser.add_argument("message", help="Message to send to the agent")
    parser.add_argument(
        "-c", "--config",
        default=os.getenv("PICOCLAW_CONFIG"),
        help="Path to configuration file",
    )
    parser.add_argument(
        "-l", "--log-level",
        choices=["debug", "info", "warning", "error"],
        help="Log level (overrides config)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug output")
    parser.add_argument("--version", action="version", version=f"picoclaw {__version__}")
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config) if args.config else Config()
    except PicoClawError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    level = "debug" if args.verbose else (args.log_level or config.logging.level)
    setup_logging(level, config.logging.format)
    logger.info(f"Starting PicoClaw v{__version__}")

    try:
        answer = asyncio.run(run_agent(config, args.message))
    except PicoClawError as e:
        logger.error(f"Agent turn failed: {e}")
        print(f"error: {e}", file=sys.stderr)
        return 1

    if answer:
        print(answer)
    return 0


if __name__ == "__main__":
    sys.exit(main())
