"""Tests for the external call executor."""

import asyncio

import pytest

from backend.smartcite.tools.executor import (
    ToolContext,
    ToolExecutionError,
    ToolExecutor,
    ToolLogger,
    ToolMetrics,
    ToolTimeoutError,
)


class RecordingMetrics(ToolMetrics):
    """Metrics double that records calls."""

    def __init__(self) -> None:
        self.latencies: list[tuple[str, str]] = []
        self.errors: list[tuple[str, str]] = []

    def record_latency(self, tool: str, outcome: str, latency_ms: float) -> None:
        self.latencies.append((tool, outcome))

    def inc_error(self, tool: str, reason: str) -> None:
        self.errors.append((tool, reason))


class RecordingLogger(ToolLogger):
    """Logger double that records calls."""

    def __init__(self) -> None:
        self.entries: list[tuple[ToolContext, str, str | None]] = []

    def log_call(
        self,
        ctx: ToolContext,
        outcome: str,
        latency_ms: float,
        error_reason: str | None = None,
    ) -> None:
        self.entries.append((ctx, outcome, error_reason))


CTX = ToolContext(tool_name="completion", stage="summary", session_id="s-1")


@pytest.mark.asyncio
async def test_execute_returns_result_and_records_success() -> None:
    """Test the success path."""
    metrics = RecordingMetrics()
    logger = RecordingLogger()
    executor = ToolExecutor(metrics=metrics, logger=logger)

    async def call() -> str:
        return "done"

    result = await executor.execute(CTX, call, timeout_s=1.0)

    assert result == "done"
    assert metrics.latencies == [("completion", "success")]
    assert metrics.errors == []
    assert logger.entries == [(CTX, "success", None)]


@pytest.mark.asyncio
async def test_execute_times_out() -> None:
    """Test that slow calls raise ToolTimeoutError."""
    metrics = RecordingMetrics()
    executor = ToolExecutor(metrics=metrics)

    async def slow() -> str:
        await asyncio.sleep(1.0)
        return "late"

    with pytest.raises(ToolTimeoutError):
        await executor.execute(CTX, slow, timeout_s=0.01)

    assert metrics.errors == [("completion", "timeout")]


@pytest.mark.asyncio
async def test_execute_wraps_errors_without_retry() -> None:
    """Test that failures are wrapped and the call is attempted once."""
    logger = RecordingLogger()
    executor = ToolExecutor(logger=logger)
    attempts = 0

    async def failing() -> str:
        nonlocal attempts
        attempts += 1
        raise ValueError("bad reply")

    with pytest.raises(ToolExecutionError) as exc_info:
        await executor.execute(CTX, failing, timeout_s=1.0)

    assert attempts == 1
    assert isinstance(exc_info.value.__cause__, ValueError)
    assert logger.entries == [(CTX, "error", "ValueError")]
