"""Colorful console logging formatter."""

import logging
import re
from datetime import datetime

# ANSI color codes
COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "red": "\033[31m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "cyan": "\033[36m",
    "white": "\033[37m",
    "bright_black": "\033[90m",
    "bright_red": "\033[91m",
    "bright_green": "\033[92m",
    "bright_yellow": "\033[93m",
    "bright_blue": "\033[94m",
    "bright_magenta": "\033[95m",
    "bright_cyan": "\033[96m",
    "bg_red": "\033[41m",
}

# Log level colors
LEVEL_COLORS = {
    "DEBUG": COLORS["bright_black"],
    "INFO": COLORS["bright_green"],
    "WARNING": COLORS["bright_yellow"],
    "ERROR": COLORS["bright_red"],
    "CRITICAL": COLORS["bg_red"] + COLORS["white"] + COLORS["bold"],
}

# Component colors for logger names
COMPONENT_COLORS = {
    "switch_mcp.server": COLORS["bright_cyan"],
    "switch_mcp.services.pool": COLORS["bright_magenta"],
    "switch_mcp.services.session": COLORS["bright_blue"],
    "switch_mcp.services": COLORS["cyan"],
    "switch_mcp.middleware": COLORS["yellow"],
    "switch_mcp.config": COLORS["green"],
    "default": COLORS["white"],
}

TARGET_PATTERN = re.compile(r"([\w.\-]+@[\w.\-\[\]:]+:\d+)")
POOL_SIZE_PATTERN = re.compile(r"(pool_size=\d+)")
BRAND_PATTERN = re.compile(r"(brand=<?\w+>?|<(?:huawei|h3c|cisco)>)")
DURATION_PATTERN = re.compile(r"(\d+\.?\d*ms)")


class ColorfulFormatter(logging.Formatter):
    """Colorful log formatter with component and target highlighting."""

    def __init__(self, use_colors: bool = True) -> None:
        """Initialize the formatter.

        Args:
            use_colors: Whether to use ANSI colors.
        """
        super().__init__()
        self.use_colors = use_colors

    def _colorize(self, text: str, color: str) -> str:
        """Apply color to text if colors are enabled."""
        if not self.use_colors:
            return text
        return f"{color}{text}{COLORS['reset']}"

    def _get_component_color(self, name: str) -> str:
        """Get color for a logger name, most specific prefix first."""
        for prefix, color in COMPONENT_COLORS.items():
            if prefix != "default" and name.startswith(prefix):
                return color
        return COMPONENT_COLORS["default"]

    def _format_timestamp(self, record: logging.LogRecord) -> str:
        dt = datetime.fromtimestamp(record.created)
        return f"{dt:%H:%M:%S}.{int(record.msecs):03d} {dt:%m/%d}"

    def _format_level(self, record: logging.LogRecord) -> str:
        level = record.levelname
        color = LEVEL_COLORS.get(level, COLORS["white"])
        return self._colorize(f"{level:<8}", color)

    def _format_component(self, record: logging.LogRecord) -> str:
        name = record.name.removeprefix("switch_mcp.")
        color = self._get_component_color(record.name)
        return self._colorize(f"{name:<20}", color)

    def _highlight_message(self, message: str) -> str:
        """Highlight targets, pool sizes, brands and durations."""
        if not self.use_colors:
            return message

        for pattern, color in (
            (TARGET_PATTERN, COLORS["bright_magenta"]),
            (POOL_SIZE_PATTERN, COLORS["cyan"]),
            (BRAND_PATTERN, COLORS["bright_blue"]),
            (DURATION_PATTERN, COLORS["bright_yellow"]),
        ):
            message = pattern.sub(f"{color}\\1{COLORS['reset']}", message)
        return message

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as: time | level | component | message."""
        timestamp = self._colorize(self._format_timestamp(record), COLORS["dim"])
        level = self._format_level(record)
        component = self._format_component(record)
        sep = self._colorize("|", COLORS["dim"])
        message = self._highlight_message(record.getMessage())

        line = f"{timestamp} {sep} {level} {sep} {component} {sep} {message}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


class SessionEventFormatter(ColorfulFormatter):
    """Adds a short marker for session lifecycle events."""

    MARKERS = (
        (("opening", "established"), "+", "bright_cyan"),
        (("closing", "removing"), "-", "bright_yellow"),
        (("reusing",), "~", "bright_magenta"),
        (("error", "failed"), "!!", "bright_red"),
        (("starting", "ready"), ">>>", "bright_green"),
        (("shutting down", "shutdown"), "<<<", "bright_red"),
    )

    def format(self, record: logging.LogRecord) -> str:
        """Prefix the base line with a lifecycle marker."""
        base = super().format(record)
        if not self.use_colors:
            return base

        message = record.getMessage().lower()
        for words, marker, color in self.MARKERS:
            if any(word in message for word in words):
                return f"{COLORS[color]}{marker:<3}{COLORS['reset']} {base}"
        return f"    {base}"
