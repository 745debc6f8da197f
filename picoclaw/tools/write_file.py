"""
Write file tool - lets the agent create files inside its workspace
"""

import asyncio
import logging
import os
from pathlib import Path
from typing import Any, Dict, Union

from .base import BaseTool
from .models import ToolResult

logger = logging.getLogger(__name__)


class WriteFileTool(BaseTool):
    """Write text content to a file under the workspace directory."""

    name = "write_file"
    description = "Write content to a file in the workspace"
    parameters = {
        "type": "object",
        "properties": {
            "path": {
                "type": "string",
                "description": "File path relative to workspace",
            },
            "content": {
                "type": "string",
                "description": "File content to write",
            },
        },
        "required": ["path", "content"],
    }

    def __init__(self, workspace: Union[str, Path]):
        self.workspace = Path(workspace).expanduser().resolve()

    def _resolve(self, path: str) -> Path:
        full_path = (self.workspace / path).resolve()
        if os.path.commonpath([str(self.workspace), str(full_path)]) != str(self.workspace):
            raise ValueError("Path is outside workspace")
        return full_path

    async def execute(self, args: Dict[str, Any]) -> ToolResult:
        path = args.get("path")
        if not isinstance(path, str) or not path:
            return ToolResult.error("Missing 'path' parameter")

        content = args.get("content")
        if not isinstance(content, str):
            return ToolResult.error("Missing 'content' parameter")

        try:
            full_path = self._resolve(path)
        except ValueError as e:
            return ToolResult.error(str(e))

        try:
            await asyncio.to_thread(self._write, full_path, content)
        except OSError as e:
            return ToolResult.error(f"Failed to write file: {e}")

        logger.info(f"File written: {path}")
        return ToolResult.success(
            f"File written successfully: {path}"
        ).with_user_content(f"✓ Created file: {path}")

    @staticmethod
    def _write(full_path: Path, content: str) -> None:
        full_path.parent.mkdir(parents=True, exist_ok=True)
        full_path.write_text(content, encoding="utf-8")
