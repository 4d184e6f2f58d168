"""Logging middleware for tool call tracking."""

import logging
import time
from typing import Any

from fastmcp.server.middleware import MiddlewareContext

from switch_mcp.middleware.base import SwitchMiddleware

REDACTED_ARGS = frozenset({"password"})


class LoggingMiddleware(SwitchMiddleware):
    """Logs tool calls with arguments, result size and duration.

    Credentials never reach the log: arguments named in REDACTED_ARGS
    are replaced with "***".
    """

    def __init__(
        self,
        logger: logging.Logger | None = None,
        include_payloads: bool = False,
        max_payload_length: int = 1000,
        slow_threshold_ms: float = 5000.0,
    ) -> None:
        """Initialize logging middleware.

        Args:
            logger: Optional custom logger.
            include_payloads: Whether to log full tool results at debug level.
            max_payload_length: Maximum payload length before truncation.
            slow_threshold_ms: Threshold in ms for slow call warnings.
                Switch reads wait for quiescence, so a few seconds is normal.
        """
        super().__init__(logger=logger)
        self.include_payloads = include_payloads
        self.max_payload_length = max_payload_length
        self.slow_threshold_ms = slow_threshold_ms

    def _format_args(self, args: dict[str, Any] | None) -> str:
        """Format tool arguments for logging, hiding credentials."""
        if not args:
            return "()"
        parts = []
        for key, value in args.items():
            if key in REDACTED_ARGS:
                value = "***"
            elif isinstance(value, str) and len(value) > 50:
                value = value[:50] + "..."
            parts.append(f"{key}={value!r}")
        return f"({', '.join(parts)})"

    def _format_duration(self, duration_ms: float) -> str:
        if duration_ms >= self.slow_threshold_ms:
            return f"{duration_ms:.1f}ms SLOW!"
        return f"{duration_ms:.1f}ms"

    def _summarize_result(self, result: Any) -> str:
        """Create a brief summary of a result for logging."""
        if result is None:
            return "null"
        if isinstance(result, str):
            return f"{len(result)} chars, {result.count(chr(10)) + 1} lines"
        if hasattr(result, "content"):
            content = result.content
            if isinstance(content, (list, tuple)):
                return f"{len(content)} content item(s)"
            return "content"
        return type(result).__name__

    async def on_call_tool(
        self,
        context: MiddlewareContext,
        call_next: Any,
    ) -> Any:
        """Log tool calls with name, redacted arguments and timing."""
        start = time.perf_counter()
        tool_name = getattr(context.message, "name", "unknown")
        args = getattr(context.message, "arguments", None)

        self.logger.info(">>> TOOL: %s%s", tool_name, self._format_args(args))

        try:
            result = await call_next(context)
        except Exception as e:
            duration_ms = (time.perf_counter() - start) * 1000
            self.logger.error(
                "!!! TOOL: %s -> %s: %s [%s]",
                tool_name,
                type(e).__name__,
                e,
                self._format_duration(duration_ms),
            )
            raise

        duration_ms = (time.perf_counter() - start) * 1000
        log_level = (
            logging.WARNING if duration_ms >= self.slow_threshold_ms else logging.INFO
        )
        self.logger.log(
            log_level,
            "<<< TOOL: %s -> %s [%s]",
            tool_name,
            self._summarize_result(result),
            self._format_duration(duration_ms),
        )

        if self.include_payloads and result is not None:
            text = str(result)
            if len(text) > self.max_payload_length:
                text = text[: self.max_payload_length] + "... [truncated]"
            self.logger.debug("    Result: %s", text)

        return result
