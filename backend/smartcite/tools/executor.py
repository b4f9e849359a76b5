"""Async executor for calls to external services.

Wraps each completion or search call with:
- Hard timeout per call
- Latency and error metrics
- Structured logging carrying session id and pipeline stage

Calls are never retried; a failed call surfaces to the caller.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

T = TypeVar("T")


# Exception types
class ToolTimeoutError(Exception):
    """External call exceeded its timeout."""

    pass


class ToolExecutionError(Exception):
    """External call failed."""

    pass


@dataclass(frozen=True)
class ToolContext:
    """Context for one external call, used for logs and metrics labels."""

    tool_name: str
    stage: str
    session_id: str | None = None


# Metrics interface (implemented by backend.smartcite.utils.metrics)
class ToolMetrics:
    """Interface for tool execution metrics."""

    def record_latency(self, tool: str, outcome: str, latency_ms: float) -> None:
        """Record tool execution latency."""
        pass

    def inc_error(self, tool: str, reason: str) -> None:
        """Increment error counter."""
        pass


# Logging interface (implemented by backend.smartcite.utils.logging)
class ToolLogger:
    """Interface for structured logging."""

    def log_call(
        self,
        ctx: ToolContext,
        outcome: str,
        latency_ms: float,
        error_reason: str | None = None,
    ) -> None:
        """Log one external call."""
        pass


class ToolExecutor:
    """Runs external calls under a timeout and records their outcome."""

    def __init__(
        self,
        metrics: ToolMetrics | None = None,
        logger: ToolLogger | None = None,
    ) -> None:
        """Initialize executor.

        Args:
            metrics: Metrics recorder (optional, defaults to no-op)
            logger: Structured logger (optional, defaults to no-op)
        """
        self._metrics = metrics or ToolMetrics()
        self._logger = logger or ToolLogger()

    async def execute(
        self,
        ctx: ToolContext,
        fn: Callable[[], Awaitable[T]],
        *,
        timeout_s: float,
    ) -> T:
        """Execute one external call.

        Args:
            ctx: Call context (tool, stage, session)
            fn: Zero-argument coroutine factory performing the call
            timeout_s: Hard timeout in seconds

        Returns:
            Whatever ``fn`` returns

        Raises:
            ToolTimeoutError: Call exceeded the timeout
            ToolExecutionError: Call raised
        """
        start_time = time.monotonic()

        try:
            result = await asyncio.wait_for(fn(), timeout=timeout_s)

        except TimeoutError as e:
            elapsed_ms = (time.monotonic() - start_time) * 1000
            self._metrics.record_latency(ctx.tool_name, "timeout", elapsed_ms)
            self._metrics.inc_error(ctx.tool_name, "timeout")
            self._logger.log_call(ctx, "timeout", elapsed_ms, error_reason="timeout")
            raise ToolTimeoutError(
                f"{ctx.tool_name} call timed out after {timeout_s}s (stage={ctx.stage})"
            ) from e

        except Exception as e:
            elapsed_ms = (time.monotonic() - start_time) * 1000
            self._metrics.record_latency(ctx.tool_name, "error", elapsed_ms)
            self._metrics.inc_error(ctx.tool_name, "execution_error")
            self._logger.log_call(ctx, "error", elapsed_ms, error_reason=type(e).__name__)
            raise ToolExecutionError(
                f"{ctx.tool_name} call failed (stage={ctx.stage}): {e}"
            ) from e

        elapsed_ms = (time.monotonic() - start_time) * 1000
        self._metrics.record_latency(ctx.tool_name, "success", elapsed_ms)
        self._logger.log_call(ctx, "success", elapsed_ms)
        return result
