"""Structured logging for external calls."""

import logging
from typing import Any

from backend.smartcite.tools.executor import ToolContext

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Install a root handler once; later calls only adjust the level."""
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format=LOG_FORMAT)
    root.setLevel(level.upper())


class StructuredToolLogger:
    """Structured logger for completion and search calls."""

    def log_call(
        self,
        ctx: ToolContext,
        outcome: str,
        latency_ms: float,
        error_reason: str | None = None,
    ) -> None:
        """Log external call with structured data."""
        log_data: dict[str, Any] = {
            "tool": ctx.tool_name,
            "stage": ctx.stage,
            "session_id": ctx.session_id,
            "outcome": outcome,
            "latency_ms": round(latency_ms, 2),
        }

        if error_reason:
            log_data["error_reason"] = error_reason

        log_msg = f"Tool call: {ctx.tool_name}/{ctx.stage} - {outcome}"

        if outcome == "success":
            logger.info(log_msg, extra={"structured": log_data})
        else:
            logger.warning(log_msg, extra={"structured": log_data})
