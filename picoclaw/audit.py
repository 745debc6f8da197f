"""
Structured audit logging for the agent runtime.

Produces JSON log entries via Python's standard logging module under
the ``picoclaw.audit`` logger name.  Each entry includes a timestamp,
event_type and event-specific fields.

Usage::

    audit = AuditLogger()
    audit.log_tool_execution(
        tool_name="write_file",
        success=True,
        duration_ms=3,
        output_chars=42,
    )
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

_audit_logger = logging.getLogger("picoclaw.audit")


class AuditLogger:
    """Structured audit logger for tool runs, agent iterations and provider calls."""

    def __init__(self, session_id: Optional[str] = None) -> None:
        self._session_id = session_id

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------

    def _emit(self, event_type: str, fields: Dict[str, Any], level: int = logging.INFO) -> None:
        entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "event_type": event_type,
        }
        if self._session_id:
            entry["session_id"] = self._session_id
        entry.update(fields)
        _audit_logger.log(level, json.dumps(entry, default=str))

    # ------------------------------------------------------------------
    # public API
    # ------------------------------------------------------------------

    def log_tool_execution(
        self,
        tool_name: str,
        success: bool,
        duration_ms: int,
        output_chars: int,
        error: Optional[str] = None,
    ) -> None:
        """Log a tool execution result."""
        fields: Dict[str, Any] = {
            "tool_name": tool_name,
            "success": success,
            "duration_ms": duration_ms,
            "output_chars": output_chars,
        }
        if error is not None:
            fields["error"] = error
        self._emit("tool_execution", fields, logging.INFO if success else logging.ERROR)

    def log_agent_iteration(
        self,
        iteration: int,
        tool_calls: List[str],
        final_answer: bool,
    ) -> None:
        """Log an agent loop iteration summary."""
        self._emit("agent_iteration", {
            "iteration": iteration,
            "tool_calls": tool_calls,
            "tool_calls_count": len(tool_calls),
            "final_answer": final_answer,
        })

    def log_provider_call(
        self,
        provider: str,
        model: str,
        success: bool,
        duration_ms: int,
        tool_calls_count: int = 0,
        error: Optional[str] = None,
    ) -> None:
        """Log the outcome of one LLM provider round trip."""
        fields: Dict[str, Any] = {
            "provider": provider,
            "model": model,
            "success": success,
            "duration_ms": duration_ms,
            "tool_calls_count": tool_calls_count,
        }
        if error is not None:
            fields["error"] = error
        self._emit("provider_call", fields, logging.INFO if success else logging.ERROR)
