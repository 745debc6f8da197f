"""
PicoClaw Runtime - Task tracking, admission control and graceful shutdown
"""

from .manager import RuntimeManager, TaskPool

__all__ = ["RuntimeManager", "TaskPool"]
