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

LEVEL_COLORS = {
    "DEBUG": COLORS["bright_black"],
    "INFO": COLORS["bright_green"],
    "WARNING": COLORS["bright_yellow"],
    "ERROR": COLORS["bright_red"],
    "CRITICAL": COLORS["bg_red"] + COLORS["white"] + COLORS["bold"],
}

# Component colors for logger names
COMPONENT_COLORS = {
    "ping_runner.server": COLORS["bright_cyan"],
    "ping_runner.services": COLORS["bright_magenta"],
    "ping_runner.tools": COLORS["bright_blue"],
    "ping_runner.middleware": COLORS["yellow"],
    "ping_runner.config": COLORS["green"],
    "default": COLORS["white"],
}

_DURATION_PATTERN = re.compile(r"(\d+\.?\d*ms)")
_EXIT_CODE_PATTERN = re.compile(r"(exit(?:ed with)?[ _]code[ =])(-?\d+)")


class ColorfulFormatter(logging.Formatter):
    """Log formatter with aligned columns and per-component colors."""

    def __init__(self, use_colors: bool = True) -> None:
        """Initialize the formatter.

        Args:
            use_colors: Whether to use ANSI colors.
        """
        super().__init__()
        self.use_colors = use_colors

    def _colorize(self, text: str, color: str) -> str:
        if not self.use_colors:
            return text
        return f"{color}{text}{COLORS['reset']}"

    def _get_component_color(self, name: str) -> str:
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
        name = record.name
        if name.startswith("ping_runner."):
            name = name[len("ping_runner."):]
        color = self._get_component_color(record.name)
        return self._colorize(f"{name:<20}", color)

    def format(self, record: logging.LogRecord) -> str:
        """Format the record as ``time | level | component | message``."""
        timestamp = self._colorize(self._format_timestamp(record), COLORS["dim"])
        level = self._format_level(record)
        component = self._format_component(record)
        sep = self._colorize("|", COLORS["dim"])
        message = self._highlight_message(record.getMessage())

        line = f"{timestamp} {sep} {level} {sep} {component} {sep} {message}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line

    def _highlight_message(self, message: str) -> str:
        """Highlight durations and exit codes."""
        if not self.use_colors:
            return message

        message = _DURATION_PATTERN.sub(
            f"{COLORS['bright_yellow']}\\1{COLORS['reset']}",
            message,
        )

        def _exit_code(match: re.Match[str]) -> str:
            color = COLORS["bright_green"] if match.group(2) == "0" else COLORS["bright_red"]
            return f"{match.group(1)}{color}{match.group(2)}{COLORS['reset']}"

        return _EXIT_CODE_PATTERN.sub(_exit_code, message)


class MCPRequestFormatter(ColorfulFormatter):
    """Formatter that prefixes lifecycle and failure events with a marker."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        if not self.use_colors:
            return base

        message = record.getMessage().lower()

        if "starting" in message or "ready" in message:
            return f"{COLORS['bright_green']}>>>{COLORS['reset']} {base}"
        elif "shutting down" in message or "shutdown" in message:
            return f"{COLORS['bright_red']}<<<{COLORS['reset']} {base}"
        elif "error" in message or "failed" in message:
            return f"{COLORS['bright_red']}!!{COLORS['reset']}  {base}"
        elif "cancelled" in message or "terminat" in message:
            return f"{COLORS['bright_magenta']}x{COLORS['reset']}   {base}"
        elif "slow" in message or "killing" in message:
            return f"{COLORS['bright_yellow']}!{COLORS['reset']}   {base}"
        elif "launching" in message:
            return f"{COLORS['bright_cyan']}+{COLORS['reset']}   {base}"

        return f"    {base}"
